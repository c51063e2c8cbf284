import time
from typing import Any, Dict, List, Optional

from axe_selenium_python import Axe
from selenium import webdriver
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.chrome.webdriver import WebDriver
from selenium.webdriver.common.by import By
from webdriver_manager.chrome import ChromeDriverManager

from a11ycheck.features.scan.services.scanner.base import ScannerResult, ScanOptions
from a11ycheck.platform.config import Settings
from a11ycheck.platform.exceptions import ScanError, ScanTimeoutError, ScanUnresolvedHostError
from a11ycheck.platform.logger import get_logger

logger = get_logger(__name__)

RUNNER_NAME = "axe"

STANDARD_TAGS = {
    "WCAG2A": ["wcag2a"],
    "WCAG2AA": ["wcag2a", "wcag2aa"],
    "WCAG2AAA": ["wcag2a", "wcag2aa", "wcag2aaa"],
}

UNRESOLVED_HOST_MARKERS = ("ERR_NAME_NOT_RESOLVED", "ERR_NAME_RESOLUTION_FAILED")


def impact_to_severity(impact: Optional[str]) -> str:
    if impact in ("critical", "serious"):
        return "error"
    return "warning"


def flatten_axe_results(results: Dict[str, Any], options: ScanOptions) -> List[Dict[str, Any]]:
    """
    Turn axe-core's rule -> nodes tree into one raw issue per affected node.
    Violations become errors or warnings by impact; incomplete checks
    (needs manual review) become notices.
    """
    issues: List[Dict[str, Any]] = []

    groups = [("violations", None)]
    if options.include_notices:
        groups.append(("incomplete", "notice"))

    for group, fixed_type in groups:
        for rule in results.get(group) or []:
            for node in rule.get("nodes") or [{}]:
                issue_type = fixed_type or impact_to_severity(node.get("impact") or rule.get("impact"))
                if issue_type == "warning" and not options.include_warnings:
                    continue
                target = node.get("target") or []
                issues.append(
                    {
                        "code": rule.get("id", ""),
                        "type": issue_type,
                        "message": rule.get("help") or rule.get("description") or "",
                        "selector": ", ".join(str(t) for t in target),
                        "context": node.get("html", ""),
                        "runner": RUNNER_NAME,
                    }
                )

    return issues


class AxeScanner:
    """Runs axe-core inside headless Chrome driven by Selenium."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _create_driver(self, options: ScanOptions) -> WebDriver:
        chrome_options = Options()
        chrome_options.add_argument("--headless=new")
        chrome_options.add_argument("--disable-gpu")
        chrome_options.add_argument("--no-sandbox")
        chrome_options.add_argument("--disable-dev-shm-usage")
        if self.settings.CHROME_BINARY:
            chrome_options.binary_location = self.settings.CHROME_BINARY

        viewport = options.viewport
        if viewport.is_mobile:
            chrome_options.add_experimental_option(
                "mobileEmulation",
                {
                    "deviceMetrics": {
                        "width": viewport.width,
                        "height": viewport.height,
                        "pixelRatio": viewport.device_scale_factor,
                        "touch": True,
                    },
                    "userAgent": options.user_agent,
                },
            )
        else:
            chrome_options.add_argument(f"--window-size={viewport.width},{viewport.height}")

        if self.settings.SCANNER_USE_DRIVER_MANAGER:
            service = Service(ChromeDriverManager().install())
        else:
            service = Service()

        driver = webdriver.Chrome(service=service, options=chrome_options)
        driver.set_page_load_timeout(options.timeout_seconds)
        driver.set_script_timeout(options.timeout_seconds)
        return driver

    @staticmethod
    def _meta_description(driver: WebDriver) -> Optional[str]:
        elements = driver.find_elements(By.CSS_SELECTOR, "meta[name='description']")
        if not elements:
            return None
        return elements[0].get_attribute("content")

    def run(self, url: str, options: ScanOptions) -> ScannerResult:
        driver = None
        try:
            driver = self._create_driver(options)
            driver.get(url)
            time.sleep(options.wait_seconds)

            axe = Axe(driver)
            axe.inject()
            tags = STANDARD_TAGS.get(options.standard.upper(), STANDARD_TAGS["WCAG2AA"])
            results = axe.run(options={"runOnly": {"type": "tag", "values": tags}})

            issues = flatten_axe_results(results, options)
            logger.info(f"axe found {len(issues)} issues on {url}")

            return ScannerResult(
                issues=issues,
                page_title=driver.title or None,
                page_description=self._meta_description(driver),
            )
        except TimeoutException as e:
            raise ScanTimeoutError(detail=f"Timed out after {options.timeout_seconds}s loading {url}: {e.msg}")
        except WebDriverException as e:
            message = e.msg or str(e)
            if any(marker in message for marker in UNRESOLVED_HOST_MARKERS):
                raise ScanUnresolvedHostError(detail=message)
            raise ScanError(detail=message)
        finally:
            if driver:
                driver.quit()

from sqlalchemy import Column, String

from a11ycheck.platform.db.base import BaseModel

class User(BaseModel):
    __tablename__ = "users"

    username = Column(String(20), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    bio = Column(String(500), nullable=False, default="")
    profile_photo = Column(String(500), nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, username={self.username})>"

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base

# Issued bearer token; deleting the row revokes the token
class AccessToken(Base):
    __tablename__ = "access_tokens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    jti = Column(String(64), unique=True, nullable=False, index=True) # JWT id claim
    name = Column(String(100), nullable=False, default="auth_token")
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="tokens")

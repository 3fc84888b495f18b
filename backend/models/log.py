import enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from database import Base

# Outcome recorded for every audited action
class LogStatus(str, enum.Enum):
    SUCCESS = "SUCCESS"
    FAIL = "FAIL"

# Append-only audit row for auth, cart, order, review and admin events
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Anonymous events (failed logins, registrations) have no user
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action = Column(String(50), index=True)
    resource = Column(String(50), index=True)
    status = Column(String(20), nullable=False, default=LogStatus.SUCCESS.value, index=True)
    ip = Column(String(64), nullable=True)

    # e.g. {"email": ...} or {"order_number": ..., "total": ...}
    meta = Column(JSON, nullable=True)

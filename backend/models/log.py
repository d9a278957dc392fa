from sqlalchemy import Column, Integer, String, DateTime, JSON, func
from database import Base

# Audit trail of administrative actions such as batch pricing runs
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)

    # Event timestamp and core action details
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    # Null for jobs started from the command line or a scheduler
    user_id = Column(Integer, nullable=True)
    action = Column(String(50), index=True)
    resource = Column(String(50), index=True)
    status = Column(String(20), index=True)
    ip = Column(String(64), nullable=True)

    # JSON container for flexible context data
    meta = Column(JSON, nullable=True)

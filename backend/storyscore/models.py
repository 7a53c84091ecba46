from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text
from .db import Base


class ProgressEntry(Base):
	__tablename__ = "progress_kv"
	# One row per persisted structure ("ProgressRecords", "OverallProgress")
	key = Column(String(64), primary_key=True)
	value_json = Column(Text, nullable=False)  # JSON string snapshot
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

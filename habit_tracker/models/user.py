# habit_tracker/models/user.py
import sqlalchemy as sa
from habit_tracker.utils.database import Base

class User(Base):
    __tablename__ = "users"
    id = sa.Column(sa.Integer, primary_key=True, autoincrement=True)
    # exact, case-sensitive match: "Alice" and "alice" are different accounts
    username = sa.Column(sa.String(255), unique=True, nullable=False, index=True)
    # HMAC-SHA512 digest of the password, keyed with password_salt
    password_hash = sa.Column(sa.LargeBinary(64), nullable=False)
    password_salt = sa.Column(sa.LargeBinary(128), nullable=False)
    created_at = sa.Column(sa.DateTime(timezone=True), server_default=sa.func.now())

# ==============================================
# STORAGE (MySQL)
# ==============================================
#
# This package handles all database access:
# connecting, introspecting the schema, and reading/writing rows.
#
# Modules:
# --------
# - base.py            → Database protocol the adapters depend on
# - mysql_client.py    → pymysql implementation of that protocol
#
# ==============================================

from .base import Database
from .mysql_client import MySQLClient, build_where, quote_identifier

__all__ = [
    "Database",
    "MySQLClient",
    "build_where",
    "quote_identifier",
]

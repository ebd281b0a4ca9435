"""
Service identity constants
"""

SERVICE_NAME = "arcanum-logout-backend"
SERVICE_TITLE = "Arcanum Academy Log-Out System"

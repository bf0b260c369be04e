"""
app/connectors package marker.
"""

from app.connectors.summary_connector import ConnectorRequestError, HMISSummaryConnector

__all__ = [
    "ConnectorRequestError",
    "HMISSummaryConnector",
]

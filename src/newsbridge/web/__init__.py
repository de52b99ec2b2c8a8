from newsbridge.web.status import BridgeStatus, create_status_app, qr_to_data_url

__all__ = ["BridgeStatus", "create_status_app", "qr_to_data_url"]

"""
dxlog-mult-listener: audible alerts for new multipliers in DXLog

Listens for DXLog contact-info UDP datagrams and plays a sound whenever
a newly logged QSO carries a multiplier.
"""

__version__ = "0.1.0"

from .config import Config, load_config
from .field_extractor import extract_field, get_field
from .alert_player import AlertPlayer, create_player
from .contact_processor import ContactInfo, ContactProcessor
from .udp_listener import MultListener

__all__ = [
    "Config",
    "load_config",
    "extract_field",
    "get_field",
    "AlertPlayer",
    "create_player",
    "ContactInfo",
    "ContactProcessor",
    "MultListener",
]

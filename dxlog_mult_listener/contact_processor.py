"""
Contact datagram processing for dxlog-mult-listener.

For each datagram:
- Fast reject anything without a <contactinfo> marker
- Extract call/band/mode/mult1-3/newqso/xqso
- Print a one-line summary
- Sound the alert for a new QSO that is a multiplier
"""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, TextIO, Tuple

from .alert_player import AlertPlayer
from .field_extractor import contains_tag, get_field

logger = logging.getLogger(__name__)


INTEREST_TAG = "contactinfo"
TRIGGER_MARKER = "  *** MULT → SOUND ***"

# Tag -> destination buffer size (including terminator)
FIELD_SIZES = {
    "call": 64,
    "band": 32,
    "mode": 16,
    "mult1": 64,
    "mult2": 64,
    "mult3": 64,
    "newqso": 16,
    "xqso": 16,
}


@dataclass
class ContactInfo:
    """Fields extracted from one contactinfo datagram ("" when absent)."""
    call: str = ""
    band: str = ""
    mode: str = ""
    mult1: str = ""
    mult2: str = ""
    mult3: str = ""
    newqso: str = ""
    xqso: str = ""  # extracted, not used for the trigger
    
    @classmethod
    def from_datagram(cls, data: bytes) -> "ContactInfo":
        return cls(**{
            tag: get_field(data, tag, size)
            for tag, size in FIELD_SIZES.items()
        })
    
    @property
    def has_mult(self) -> bool:
        return bool(self.mult1 or self.mult2 or self.mult3)
    
    @property
    def is_new(self) -> bool:
        return self.newqso.lower() == "true"
    
    @property
    def triggers_alert(self) -> bool:
        """New QSO that counts as a multiplier."""
        return self.has_mult and self.is_new


@dataclass
class ProcessorStats:
    """Statistics for datagram processing."""
    datagrams: int = 0
    ignored: int = 0
    contacts: int = 0
    alerts: int = 0
    errors: int = 0
    
    def to_dict(self) -> dict:
        return {
            "datagrams": self.datagrams,
            "ignored": self.ignored,
            "contacts": self.contacts,
            "alerts": self.alerts,
            "errors": self.errors,
        }


def format_timestamp(dt: datetime) -> str:
    """Format a local time as [YYYY-MM-DD HH:MM:SS]."""
    return dt.strftime("[%Y-%m-%d %H:%M:%S]")


def format_contact_line(timestamp: datetime, sender_ip: str, info: ContactInfo) -> str:
    """
    Format the summary line for one contact (without trigger marker).
    
    Empty fields are shown as '-'.
    """
    def show(value: str) -> str:
        return value or "-"
    
    return (
        f"{format_timestamp(timestamp)} "
        f"PKT from {sender_ip:<15} "
        f"call={show(info.call):<8} "
        f"band={show(info.band):<3} "
        f"mode={show(info.mode):<3} "
        f"mult1={show(info.mult1):<2}  "
        f"mult2={show(info.mult2):<2}  "
        f"mult3={show(info.mult3):<2} "
        f"newqso={show(info.newqso):<5}"
    )


class ContactProcessor:
    """
    Turns received datagrams into console lines and alerts.
    
    Holds no state between datagrams apart from counters.
    """
    
    def __init__(
        self,
        player: AlertPlayer,
        output: Optional[TextIO] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize processor.
        
        Args:
            player: Alert sound strategy
            output: Stream for summary lines (default: sys.stdout)
            clock: Local time source
        """
        self.player = player
        self.output = output
        self.clock = clock
        self.stats = ProcessorStats()
        self._line_open = False
    
    @property
    def _out(self) -> TextIO:
        # Resolved late so a replaced sys.stdout is honoured
        return self.output if self.output is not None else sys.stdout
    
    def process(self, data: bytes, addr: Tuple[str, int]) -> bool:
        """
        Process one datagram.
        
        Args:
            data: Raw datagram payload
            addr: Sender (ip, port)
            
        Returns:
            True if the alert was triggered
        """
        self.stats.datagrams += 1
        
        if not contains_tag(data, INTEREST_TAG):
            self.stats.ignored += 1
            return False
        
        info = ContactInfo.from_datagram(data)
        self.stats.contacts += 1
        logger.debug(f"Contact from {addr[0]}: {info}")
        
        out = self._out
        out.write(format_contact_line(self.clock(), addr[0], info))
        self._line_open = True
        
        triggered = info.triggers_alert
        if triggered:
            self.stats.alerts += 1
            out.write(TRIGGER_MARKER)
            out.flush()
            self.player.play_alert()
        
        out.write("\n")
        out.flush()
        self._line_open = False
        return triggered

    def end_line(self) -> None:
        """Terminate a summary line left unfinished by a failed datagram."""
        if self._line_open:
            self._line_open = False
            out = self._out
            out.write("\n")
            out.flush()

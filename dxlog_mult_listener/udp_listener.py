"""
UDP listener for dxlog-mult-listener.

Owns the socket and feeds every datagram, one at a time, to a
ContactProcessor. Processing (including a blocking alert tone)
completes before the next receive; any backlog waits in the kernel
receive buffer.
"""

import logging
import socket
from typing import Optional, Tuple

from .config import ListenerConfig
from .contact_processor import ContactProcessor

logger = logging.getLogger(__name__)


class MultListener:
    """
    Receive loop bound to one UDP port.
    
    Setup errors from open() propagate to the caller; receive and
    processing errors are logged and the loop carries on.
    """
    
    def __init__(self, config: ListenerConfig, processor: ContactProcessor):
        """
        Initialize listener.
        
        Args:
            config: Listener settings (host, port, recv_size)
            processor: Handler for each received datagram
        """
        self.config = config
        self.processor = processor
        self._socket: Optional[socket.socket] = None
    
    @property
    def address(self) -> Tuple[str, int]:
        """Bound (host, port); the real port when bound to port 0."""
        if self._socket is None:
            return (self.config.host, self.config.port)
        return self._socket.getsockname()[:2]
    
    def open(self) -> None:
        """
        Create and bind the UDP socket.
        
        Raises:
            OSError: If the socket cannot be created or bound
        """
        if self._socket is not None:
            logger.warning("Listener already open")
            return
        
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((self.config.host, self.config.port))
        except OSError:
            sock.close()
            raise
        
        self._socket = sock
        logger.debug(f"Bound UDP socket to {self.address[0]}:{self.address[1]}")
    
    def receive_once(self) -> None:
        """Receive one datagram and process it."""
        if self._socket is None:
            raise RuntimeError("Listener is not open")
        
        try:
            data, addr = self._socket.recvfrom(self.config.recv_size)
        except OSError as e:
            logger.error(f"recvfrom failed: {e}")
            return
        
        try:
            self.processor.process(data, addr)
        except MemoryError:
            self.processor.stats.errors += 1
            self.processor.end_line()
            logger.error(f"Out of memory processing {len(data)} bytes from {addr[0]}, dropped")
        except Exception as e:
            self.processor.stats.errors += 1
            self.processor.end_line()
            logger.error(f"Error processing datagram from {addr[0]}: {e}")
    
    def run_forever(self) -> None:
        """Receive and process datagrams until the process is stopped."""
        if self._socket is None:
            self.open()
        
        while True:
            self.receive_once()
    
    def close(self) -> None:
        """Close the socket."""
        if self._socket is not None:
            self._socket.close()
            self._socket = None
            logger.debug("UDP socket closed")
    
    def __enter__(self) -> "MultListener":
        self.open()
        return self
    
    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

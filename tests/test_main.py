"""Tests for the command line entry point."""

import io
import logging
import socket
import sys

from dxlog_mult_listener.__main__ import main, print_banner
from dxlog_mult_listener.alert_player import create_player
from dxlog_mult_listener.config import Config
from dxlog_mult_listener.udp_listener import MultListener


class TestBanner:
    """Tests for the startup banner."""
    
    def test_wav_banner(self):
        config = Config()
        out = io.StringIO()
        print_banner(config, create_player(config.sound), out)
        text = out.getvalue()
        assert "=== DXLog Multiplier Listener ===" in text
        assert "Port      : UDP 12060" in text
        assert "newqso=true" in text
        assert "WAV file via aplay (handbell.wav)" in text
        assert "Tone" not in text
    
    def test_tone_banner(self):
        config = Config()
        config.sound.mode = "beep"
        out = io.StringIO()
        print_banner(config, create_player(config.sound), out)
        assert "Tone      : 880 Hz, 400 ms, volume 60%" in out.getvalue()


class TestMain:
    """Tests for fatal startup errors."""
    
    def test_missing_config(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["dxlog-mult-listener", "-c", str(tmp_path / "nope.toml")])
        assert main() == 1
    
    def test_bind_failure_exits(self, tmp_path, monkeypatch, capsys):
        path = tmp_path / "config.toml"
        path.write_text('[listener]\nhost = "192.0.2.1"\n')
        monkeypatch.setattr(sys, "argv", ["dxlog-mult-listener", "-c", str(path), "-s", "beep"])
        assert main() == 1
        assert "DXLog Multiplier Listener" in capsys.readouterr().out
    
    def test_invalid_port_override(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["dxlog-mult-listener", "-p", "0"])
        assert main() == 1
    
    def test_wrongly_typed_config_exits(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('[listener]\nport = "12060"\n')
        monkeypatch.setattr(sys, "argv", ["dxlog-mult-listener", "-c", str(path)])
        assert main() == 1


def free_udp_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestInterrupt:
    """Tests for the normal run path ending in Ctrl-C."""
    
    def test_keyboard_interrupt_exits_cleanly(self, tmp_path, monkeypatch, capsys, caplog):
        port = free_udp_port()
        path = tmp_path / "config.toml"
        path.write_text('[listener]\nhost = "127.0.0.1"\n[sound]\nmode = "beep"\n')
        running = []
        
        def interrupted(self):
            running.append(self)
            assert self._socket is not None
            raise KeyboardInterrupt
        
        monkeypatch.setattr(MultListener, "run_forever", interrupted)
        monkeypatch.setattr(sys, "argv", ["dxlog-mult-listener", "-c", str(path), "-p", str(port)])
        
        with caplog.at_level(logging.INFO):
            assert main() == 0
        
        assert len(running) == 1
        assert running[0]._socket is None
        assert f"Listening on 127.0.0.1:{port}" in capsys.readouterr().out
        assert "Interrupted" in caplog.text
        assert "Processor stats" in caplog.text

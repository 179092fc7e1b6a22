from __future__ import annotations

import unittest
from unittest import mock

from gitf import terminal as terminal_mod


class TerminalControllerTests(unittest.TestCase):
    def test_raw_mode_enters_and_restores_on_error(self) -> None:
        writes: list[bytes] = []
        with mock.patch.object(terminal_mod.termios, "tcgetattr", return_value=["saved"]), mock.patch.object(
            terminal_mod.termios, "tcsetattr"
        ) as tcsetattr, mock.patch.object(terminal_mod.tty, "setraw") as setraw, mock.patch.object(
            terminal_mod.os, "write", side_effect=lambda _fd, data: writes.append(data)
        ):
            controller = terminal_mod.TerminalController(5, 6)
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        setraw.assert_called_once_with(5, terminal_mod.termios.TCSAFLUSH)
        tcsetattr.assert_called_once_with(5, terminal_mod.termios.TCSAFLUSH, ["saved"])
        self.assertEqual(writes, [b"\x1b[?1049h\x1b[?25l", b"\x1b[?25h\x1b[?1049l"])


if __name__ == "__main__":
    unittest.main()

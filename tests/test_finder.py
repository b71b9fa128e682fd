# (c) Copyright IBM Corp. 2025

import asyncio
import logging
from typing import TYPE_CHECKING, Generator

import pytest

from porthound import CandidatePort, CandidatePortFinder, DiscoveryOptions
from porthound.finder import discover_candidate_ports, find_candidate_ports
from tests.helpers import AGENT_CMD, build_proc_root, fd_line, tcp_row, tcp_table

if TYPE_CHECKING:
    from pytest import LogCaptureFixture
    from pytest_mock import MockerFixture

MYSERVER_ARGV = ["/usr/bin/myserver", "--port", "8080"]


class TestCandidatePortFinder:
    @pytest.fixture(autouse=True)
    def _resource(self, tmp_path, mocker: "MockerFixture") -> Generator[None, None, None]:
        self.proc_root = str(tmp_path / "proc")
        self.options = DiscoveryOptions(proc_root=self.proc_root)
        self.socket_listing = mocker.patch(
            "porthound.finder.list_socket_descriptors", return_value=""
        )
        yield
        logging.getLogger("porthound").setLevel(logging.WARN)

    def test_scenario_a_attributed_port(self) -> None:
        build_proc_root(
            self.proc_root,
            tcp=tcp_table(tcp_row(0, "0100007F:1F90", "0A", 12345)),
            tcp6=tcp_table(),
            processes={42: ("/srv/app", MYSERVER_ARGV)},
        )
        self.socket_listing.return_value = fd_line(42, 3, 12345)

        result = CandidatePortFinder(self.options).find_candidate_ports()

        assert result == [
            CandidatePort(port=8080, detail="/usr/bin/myserver --port 8080")
        ]
        self.socket_listing.assert_called_once_with(self.proc_root, 5.0)

    def test_scenario_b_agent_is_excluded(self) -> None:
        build_proc_root(
            self.proc_root,
            tcp=tcp_table(tcp_row(0, "0100007F:1F90", "0A", 12345)),
            processes={42: ("/home/dev", AGENT_CMD.split(" "))},
        )
        self.socket_listing.return_value = fd_line(42, 3, 12345)

        assert CandidatePortFinder(self.options).find_candidate_ports() == []

    def test_scenario_c_unowned_socket_is_omitted(self) -> None:
        build_proc_root(
            self.proc_root,
            tcp=tcp_table(
                tcp_row(0, "0100007F:1F90", "0A", 12345),
                tcp_row(1, "0100007F:0BB8", "0A", 999),
            ),
            processes={42: ("/srv/app", MYSERVER_ARGV)},
        )
        self.socket_listing.return_value = fd_line(42, 3, 12345)

        result = CandidatePortFinder(self.options).find_candidate_ports()

        assert [candidate.port for candidate in result] == [8080]

    def test_scenario_c_surfaced_when_configured(self) -> None:
        build_proc_root(
            self.proc_root,
            tcp=tcp_table(tcp_row(0, "0100007F:0BB8", "0A", 999)),
        )
        self.options.surface_unattributed = True

        result = CandidatePortFinder(self.options).find_candidate_ports()

        assert result == [CandidatePort(port=3000, detail="unknown")]

    def test_scenario_d_same_port_collapses(self) -> None:
        build_proc_root(
            self.proc_root,
            tcp=tcp_table(tcp_row(0, "0100007F:1F90", "0A", 12345)),
            tcp6=tcp_table(
                tcp_row(0, "00000000000000000000000000000000:1F90", "0A", 54321)
            ),
            processes={
                42: ("/srv/app", MYSERVER_ARGV),
                43: ("/srv/other", ["/usr/bin/otherserver", "-p", "8080"]),
            },
        )
        self.socket_listing.return_value = "\n".join(
            [fd_line(42, 3, 12345), fd_line(43, 5, 54321)]
        )

        result = CandidatePortFinder(self.options).find_candidate_ports()

        assert len(result) == 1
        assert result[0].port == 8080

    def test_non_listening_sockets_are_ignored(self) -> None:
        build_proc_root(
            self.proc_root,
            tcp=tcp_table(tcp_row(0, "0100007F:1F90", "01", 12345)),
            processes={42: ("/srv/app", MYSERVER_ARGV)},
        )
        self.socket_listing.return_value = fd_line(42, 3, 12345)

        assert CandidatePortFinder(self.options).find_candidate_ports() == []

    def test_extra_exclude_patterns(self) -> None:
        build_proc_root(
            self.proc_root,
            tcp=tcp_table(tcp_row(0, "0100007F:1F90", "0A", 12345)),
            processes={42: ("/srv/app", MYSERVER_ARGV)},
        )
        self.socket_listing.return_value = fd_line(42, 3, 12345)
        self.options.exclude_patterns = ["myserver"]

        assert CandidatePortFinder(self.options).find_candidate_ports() == []

    def test_missing_tables(self) -> None:
        build_proc_root(self.proc_root, processes={42: ("/srv/app", MYSERVER_ARGV)})
        self.socket_listing.return_value = fd_line(42, 3, 12345)

        assert CandidatePortFinder(self.options).find_candidate_ports() == []

    def test_no_procfs(self, caplog: "LogCaptureFixture") -> None:
        self.options.log_level = logging.DEBUG

        result = CandidatePortFinder(self.options).find_candidate_ports()

        assert result == []
        self.socket_listing.assert_not_called()
        assert (
            f"No procfs at {self.proc_root}; candidate port discovery unsupported"
            in caplog.messages
        )

    def test_unexpected_error_is_contained(
        self, mocker: "MockerFixture", caplog: "LogCaptureFixture"
    ) -> None:
        build_proc_root(self.proc_root)
        self.options.log_level = logging.DEBUG
        mocker.patch("porthound.finder.scan_processes", side_effect=RuntimeError("boom"))

        assert CandidatePortFinder(self.options).find_candidate_ports() == []
        assert "find_candidate_ports: " in caplog.messages

    def test_each_call_reads_fresh_state(self) -> None:
        build_proc_root(
            self.proc_root,
            tcp=tcp_table(tcp_row(0, "0100007F:1F90", "0A", 12345)),
            processes={42: ("/srv/app", MYSERVER_ARGV)},
        )
        finder = CandidatePortFinder(self.options)

        assert finder.find_candidate_ports() == []

        self.socket_listing.return_value = fd_line(42, 3, 12345)
        assert [candidate.port for candidate in finder.find_candidate_ports()] == [8080]

    def test_find_candidate_ports_async(self) -> None:
        build_proc_root(
            self.proc_root,
            tcp=tcp_table(tcp_row(0, "0100007F:1F90", "0A", 12345)),
            processes={42: ("/srv/app", MYSERVER_ARGV)},
        )
        self.socket_listing.return_value = fd_line(42, 3, 12345)
        finder = CandidatePortFinder(self.options)

        result = asyncio.run(finder.find_candidate_ports_async())

        assert result == [
            CandidatePort(port=8080, detail="/usr/bin/myserver --port 8080")
        ]

    def test_discover_candidate_ports(self) -> None:
        build_proc_root(
            self.proc_root,
            tcp=tcp_table(tcp_row(0, "0100007F:1F90", "0A", 12345)),
            processes={42: ("/srv/app", MYSERVER_ARGV)},
        )
        self.socket_listing.return_value = fd_line(42, 3, 12345)

        assert discover_candidate_ports(self.options) == [
            CandidatePort(port=8080, detail="/usr/bin/myserver --port 8080")
        ]

    def test_find_candidate_ports_wire_format(self) -> None:
        build_proc_root(
            self.proc_root,
            tcp=tcp_table(tcp_row(0, "0100007F:1F90", "0A", 12345)),
            processes={42: ("/srv/app", MYSERVER_ARGV)},
        )
        self.socket_listing.return_value = fd_line(42, 3, 12345)

        assert find_candidate_ports(self.options) == [
            {"port": 8080, "detail": "/usr/bin/myserver --port 8080"}
        ]

    def test_default_options_from_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PORTHOUND_PROC_ROOT", self.proc_root)
        monkeypatch.setenv("PORTHOUND_SOCKET_LISTING_TIMEOUT", "1.5")
        build_proc_root(self.proc_root, tcp=tcp_table())

        assert find_candidate_ports() == []
        self.socket_listing.assert_called_once_with(self.proc_root, 1.5)

    def test_config_path_is_a_directory(
        self, tmp_path, monkeypatch: pytest.MonkeyPatch, caplog: "LogCaptureFixture"
    ) -> None:
        monkeypatch.setenv("PORTHOUND_CONFIG_PATH", str(tmp_path))
        monkeypatch.setenv("PORTHOUND_PROC_ROOT", self.proc_root)
        build_proc_root(self.proc_root, tcp=tcp_table())

        assert find_candidate_ports() == []
        assert any(
            m.startswith("ConfigReader: Unable to read configuration file ")
            for m in caplog.messages
        )

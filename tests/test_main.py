from __future__ import annotations

import pytest
import yaml

from conftest import write_host_file
from mulecube_installer import main as main_mod
from mulecube_installer.config import load_config
from mulecube_installer.errors import ConfigError


@pytest.fixture
def config_file(tmp_path, host_root):
    p = tmp_path / "installer.yaml"
    p.write_text(yaml.safe_dump({"paths": {"host_root": str(host_root)}}))
    return p


def _run(config_file, confirm=lambda q: True):
    return main_mod.run(config_path=str(config_file), log_path=None, confirm=confirm)


def test_full_run_on_a_pi(pi_host, host_root, config_file, capsys):
    pi_host.binaries.add("docker")
    state = _run(config_file)

    assert state["execution"]["ran_steps"][0] == "10_preflight"
    assert state["execution"]["ran_steps"][-1] == "90_summary"
    assert state["execution"]["warnings"] == []
    assert (host_root / "etc/dnsmasq.d/mulecube.conf").exists()
    assert (host_root / "srv/scripts/start-all").exists()
    out = capsys.readouterr().out
    assert "MuleCube Installation Complete!" in out
    assert "sudo reboot" in out


def test_no_wifi_still_reaches_summary(host, host_root, config_file, capsys):
    state = _run(config_file)

    assert "90_summary" in state["execution"]["ran_steps"]
    assert any("No WiFi interface" in w for w in state["execution"]["warnings"])
    assert not (host_root / "etc/hostapd/hostapd.conf").exists()
    assert "No WiFi interface" in capsys.readouterr().out


def test_no_wifi_exit_code_is_zero(host, config_file):
    assert main_mod.main(["--config", str(config_file), "--log", "unused.log"]) == 0


def test_declined_prompt_exits_one_without_installing(host, host_root, config_file, monkeypatch):
    write_host_file(host_root, "/proc/device-tree/model", "QEMU Virtual Machine\x00")
    monkeypatch.setattr("builtins.input", lambda prompt="": "n")

    assert main_mod.main(["--config", str(config_file)]) == 1
    assert not host.ran("apt-get")
    assert not host.ran("curl")
    assert not (host_root / "srv").exists()


def test_package_failure_stops_the_run(host, host_root, config_file):
    host.on("apt-get", "install", returncode=100)
    assert main_mod.main(["--config", str(config_file)]) == 1
    assert not host.ran("systemctl")
    assert not (host_root / "etc/sysctl.d/90-mulecube.conf").exists()


def test_invalid_plan_rejected_before_any_step(host, tmp_path, host_root):
    p = tmp_path / "bad.yaml"
    p.write_text(
        yaml.safe_dump(
            {
                "paths": {"host_root": str(host_root)},
                "wifi": {"ap_ip": "192.168.42.20", "dhcp_start": "192.168.42.10"},
            }
        )
    )
    assert main_mod.main(["--config", str(p)]) == 1
    assert host.calls == []


def test_config_overrides_and_errors(tmp_path):
    p = tmp_path / "c.yaml"
    p.write_text("install_dir: /opt/mulecube\nwifi:\n  ssid: Cube\n  channel: 11\n")
    cfg = load_config(str(p))
    assert cfg.install_dir == "/opt/mulecube"
    plan = cfg.network_plan()
    assert (plan.ssid, plan.channel, plan.ap_ip) == ("Cube", 11, "192.168.42.1")

    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.yaml"))

    bad = tmp_path / "list.yaml"
    bad.write_text("- a\n- b\n")
    with pytest.raises(ConfigError):
        load_config(str(bad))


@pytest.mark.parametrize(
    "body",
    [
        "wifi: open\n",
        "wifi:\n  channel: auto\n",
        "wifi:\n  local_hostnames: mulecube.local\n",
        "packages: git\n",
        "os:\n  ids: debian\n",
    ],
)
def test_wrongly_typed_config_exits_one(host, tmp_path, host_root, caplog, body):
    p = tmp_path / "typed.yaml"
    p.write_text(f"paths:\n  host_root: {host_root}\n{body}")

    with caplog.at_level("ERROR"):
        assert main_mod.main(["--config", str(p)]) == 1
    assert not host.ran("apt-get", "install")
    assert any("config" in r.getMessage() for r in caplog.records if r.levelname == "ERROR")


def test_wrongly_typed_values_raise_config_error(tmp_path):
    p = tmp_path / "c.yaml"
    p.write_text("os:\n  ids: debian\npackages: git\nwifi:\n  channel: true\n")
    cfg = load_config(str(p))

    with pytest.raises(ConfigError, match="os.ids"):
        cfg.os_ids
    with pytest.raises(ConfigError, match="packages"):
        cfg.packages
    with pytest.raises(ConfigError, match="wifi.channel"):
        cfg.network_plan()


def test_unexpected_os_error_is_reported(host, config_file, caplog, monkeypatch):
    def read_only(**kwargs):
        raise PermissionError(13, "Permission denied", "/etc/hostapd/hostapd.conf")

    monkeypatch.setattr(main_mod, "run_pipeline", read_only)

    with caplog.at_level("ERROR"):
        assert main_mod.main(["--config", str(config_file)]) == 1
    assert any("Permission denied" in r.getMessage() for r in caplog.records if r.levelname == "ERROR")

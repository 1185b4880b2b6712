import pytest

from packetlink.config import ConfigError, load_config


def test_reads_keys(tmp_path):
    path = tmp_path / "cliente.config"
    path.write_text("IP=127.0.0.1\nPUERTO=4444\nCLAVE=hola\n", encoding="utf-8")
    assert load_config(path) == {"IP": "127.0.0.1", "PUERTO": "4444", "CLAVE": "hola"}


def test_ignores_comments_and_blank_lines(tmp_path):
    path = tmp_path / "cliente.config"
    path.write_text("# comment\n\nIP=127.0.0.1\n   \n#PUERTO=1\n", encoding="utf-8")
    assert load_config(path) == {"IP": "127.0.0.1"}


def test_splits_on_first_equals(tmp_path):
    path = tmp_path / "cliente.config"
    path.write_text("CLAVE=a=b\n", encoding="utf-8")
    assert load_config(path)["CLAVE"] == "a=b"


def test_skips_lines_without_equals(tmp_path):
    path = tmp_path / "cliente.config"
    path.write_text("garbage\nPUERTO=4444\n", encoding="utf-8")
    assert load_config(path) == {"PUERTO": "4444"}


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.config")


def test_accepts_string_path(tmp_path):
    path = tmp_path / "cliente.config"
    path.write_text("CLAVE=valor\n", encoding="utf-8")
    assert load_config(str(path)) == {"CLAVE": "valor"}
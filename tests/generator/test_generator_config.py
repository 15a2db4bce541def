from __future__ import annotations

from pathlib import Path

import pytest

from shared_reexports.generator import config as cfg


def test_load_config_defaults(tmp_path: Path) -> None:
    result = cfg.load_config(env={}, root=tmp_path)

    root = tmp_path.resolve()
    assert result.layout.root == root
    assert result.config_path is None
    assert result.config.manifest_path == root / "package.json"
    assert result.config.field == "theiaReExports"
    assert result.config.shared_dir == root / "shared"
    assert result.config.markdown_path == root / "EXPORTS.md"
    assert result.config.optional == cfg.OptionalShim(
        package="@theia/electron", name="electron"
    )
    assert result.config.log_level == "INFO"


def test_load_config_reads_default_file(tmp_path: Path) -> None:
    (tmp_path / cfg.CONFIG_FILENAME).write_text(
        """
        [manifest]
        field = "sharedExports"

        [output]
        shared_dir = "lib/shared"
        markdown = "docs/EXPORTS.md"

        [optional]
        package = ""

        [logging]
        level = "debug"
        """.strip()
        + "\n",
        encoding="utf-8",
    )

    result = cfg.load_config(env={}, root=tmp_path)

    root = tmp_path.resolve()
    assert result.config_path == root / cfg.CONFIG_FILENAME
    assert result.config.field == "sharedExports"
    assert result.config.shared_dir == root / "lib" / "shared"
    assert result.config.markdown_path == root / "docs" / "EXPORTS.md"
    assert result.config.optional is None
    assert result.config.log_level == "DEBUG"


def test_load_config_precedence(tmp_path: Path) -> None:
    (tmp_path / cfg.CONFIG_FILENAME).write_text(
        '[output]\nshared_dir = "from-file"\nmarkdown = "FILE.md"\n'
        '[logging]\nlevel = "ERROR"\n',
        encoding="utf-8",
    )
    env = {
        "REEXPORTS_SHARED_DIR": "from-env",
        "REEXPORTS_MARKDOWN": "ENV.md",
    }
    overrides = cfg.ConfigOverrides(shared_dir=Path("from-cli"))

    result = cfg.load_config(env=env, root=tmp_path, overrides=overrides)

    root = tmp_path.resolve()
    assert result.config.shared_dir == root / "from-cli"
    assert result.config.markdown_path == root / "ENV.md"
    assert result.config.log_level == "ERROR"


def test_load_config_absolute_paths_are_kept(tmp_path: Path) -> None:
    elsewhere = tmp_path / "elsewhere"
    overrides = cfg.ConfigOverrides(manifest_path=elsewhere / "package.json")

    result = cfg.load_config(env={}, root=tmp_path, overrides=overrides)

    assert result.config.manifest_path == elsewhere / "package.json"


def test_load_config_reads_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text(
        "REEXPORTS_FIELD=dotenvField\nREEXPORTS_LOG_LEVEL=warning\n",
        encoding="utf-8",
    )

    result = cfg.load_config(
        env={"REEXPORTS_LOG_LEVEL": "error"}, root=tmp_path
    )

    assert result.config.field == "dotenvField"
    assert result.config.log_level == "ERROR"


def test_load_config_explicit_missing_file(tmp_path: Path) -> None:
    with pytest.raises(cfg.ReExportConfigError, match="not found"):
        cfg.load_config(
            env={}, root=tmp_path, config_path=Path("missing.toml")
        )


def test_load_config_env_config_path(tmp_path: Path) -> None:
    custom = tmp_path / "conf" / "custom.toml"
    custom.parent.mkdir()
    custom.write_text('[manifest]\npath = "meta.json"\n', encoding="utf-8")

    result = cfg.load_config(
        env={"REEXPORTS_CONFIG": "conf/custom.toml"}, root=tmp_path
    )

    assert result.config_path == tmp_path.resolve() / "conf" / "custom.toml"
    assert result.config.manifest_path == tmp_path.resolve() / "meta.json"


def test_load_config_rejects_unknown_keys(tmp_path: Path) -> None:
    (tmp_path / cfg.CONFIG_FILENAME).write_text(
        "[output]\nbogus = 1\n", encoding="utf-8"
    )

    with pytest.raises(cfg.ReExportConfigError, match="output.bogus"):
        cfg.load_config(env={}, root=tmp_path)


def test_load_config_rejects_empty_field(tmp_path: Path) -> None:
    (tmp_path / cfg.CONFIG_FILENAME).write_text(
        '[manifest]\nfield = "  "\n', encoding="utf-8"
    )

    with pytest.raises(cfg.ReExportConfigError, match="manifest.field"):
        cfg.load_config(env={}, root=tmp_path)


def test_load_config_optional_requires_name(tmp_path: Path) -> None:
    (tmp_path / cfg.CONFIG_FILENAME).write_text(
        '[optional]\npackage = "native-keymap"\nname = ""\n',
        encoding="utf-8",
    )

    with pytest.raises(cfg.ReExportConfigError, match="optional.name"):
        cfg.load_config(env={}, root=tmp_path)


def test_load_config_missing_root(tmp_path: Path) -> None:
    with pytest.raises(cfg.ReExportConfigError, match="does not exist"):
        cfg.load_config(env={}, root=tmp_path / "missing")


def test_load_config_non_utf8_file(tmp_path: Path) -> None:
    (tmp_path / "reexports.toml").write_bytes(b'[logging]\nlevel = "\xff"\n')

    with pytest.raises(cfg.ReExportConfigError, match="not valid UTF-8"):
        cfg.load_config(env={}, root=tmp_path)


def test_config_template_round_trips(tmp_path: Path) -> None:
    contents = cfg.read_config_template()
    assert "[manifest]" in contents
    assert "shared_dir" in contents

    target = tmp_path / "nested" / "reexports.toml"
    assert cfg.write_config_template(target) == target
    assert target.read_text(encoding="utf-8") == contents

    with pytest.raises(cfg.ReExportConfigError, match="already exists"):
        cfg.write_config_template(target)
    assert cfg.write_config_template(target, overwrite=True) == target

    loaded = cfg.load_config(env={}, root=tmp_path, config_path=target)
    assert loaded.config.field == "theiaReExports"
    assert loaded.config.optional == cfg.OptionalShim(
        package="@theia/electron", name="electron"
    )

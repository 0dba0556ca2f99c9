"""Test CLI entrypoint."""


def test_cli_module_imports():
    """CLI module should import without error."""
    from logkeeper import cli
    assert hasattr(cli, "main")


def test_cli_main_is_callable():
    """CLI main should be callable."""
    from logkeeper.cli import main
    assert callable(main)


def test_package_main_module_imports():
    """python -m logkeeper entry module should import without running."""
    import logkeeper.__main__  # noqa: F401

from __future__ import annotations

import typer

from etherpad_client import ClientFactory, EtherpadClientError, NetworkPolicy, is_url_blocked

from .config import config_path, load_settings, normalize_base_url, redacted
from .console import err, info, ok, print_json, warn
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="etherpad",
        help="Check the etherpad server settings.",
        no_args_is_help=True,
    )

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    app.command("check")(check)
    app.command("url-check")(url_check)
    app.command("show-config")(show_config)
    return app


def check(
        json_output: bool = typer.Option(False, "--json", help="Output JSON only."),
) -> None:
    """Connect with the configured settings: version check and api key check."""
    settings = load_settings()
    if not settings.base_url:
        err(f"No server url configured. Set url in {config_path()} or ETHERPAD_URL.")
        raise typer.Exit(code=2)

    if not settings.ignore_security:
        blocked = is_url_blocked(settings.base_url, NetworkPolicy(settings.blocked_hosts))
        if blocked:
            warn(f"The server url is blocked by the network policy: {blocked}")

    factory = ClientFactory(settings, testing=False)
    try:
        client = factory.get_instance()
    except EtherpadClientError as exc:
        if json_output:
            print_json({"ok": False, "error": exc.code, "message": str(exc)})
        else:
            err(f"{exc} ({exc.code})")
        raise typer.Exit(code=1)

    try:
        server_version = client.get_version()
    except EtherpadClientError:
        server_version = None
    finally:
        client.close()

    if json_output:
        print_json({
            "ok": True,
            "base_url": client.base_url,
            "api_version": client.api_version,
            "server_version": server_version,
        })
        return
    ok(f"Connected to {client.base_url} (api {client.api_version}, server {server_version or 'unknown'})")


def url_check(
        url: str = typer.Argument(..., help="Server url to test."),
        json_output: bool = typer.Option(False, "--json", help="Output JSON only."),
) -> None:
    """Tell whether a server url points to a blocked network."""
    settings = load_settings()
    target = normalize_base_url(url)
    blocked = is_url_blocked(target, NetworkPolicy(settings.blocked_hosts))
    if json_output:
        print_json({"url": target, "blocked": bool(blocked), "detail": blocked})
    elif blocked:
        warn(f"Blocked: {blocked}")
        if not settings.ignore_security:
            info("Set ignoresecurity = true to allow servers on internal networks.")
    else:
        ok(f"Not blocked: {target}")
    if blocked:
        raise typer.Exit(code=1)


def show_config() -> None:
    """Print the effective settings (api key redacted)."""
    print_json(redacted(load_settings()))


app = _build_app()


def main() -> None:
    app()


if __name__ == "__main__":
    main()

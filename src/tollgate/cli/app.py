"""Tollgate CLI application using Typer.

This module provides command-line utilities for operators: secret
generation for deployment configuration, and issuing or inspecting
tokens with the configured engine.
"""

import json
import secrets

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from tollgate.dependencies import get_jwt_service
from tollgate_auth import JWTService, TokenConfigurationError, TokenRejected
from tollgate_config import configure_logging

app = typer.Typer(
    name="tollgate",
    help="Tollgate - stateless JWT session tokens",
    no_args_is_help=True,
)
console = Console(soft_wrap=True)


# Create secrets subcommand group
secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

token_app = typer.Typer(
    name="token",
    help="Issue and inspect tokens with the configured secret",
    no_args_is_help=True,
)
app.add_typer(token_app)


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        envvar="LOG_LEVEL",
        help=(
            "Log level for tollgate loggers. Defaults to WARNING, unlike the "
            "INFO service default, so issued tokens are the only stdout output"
        ),
    ),
) -> None:
    """Tollgate command-line tools."""
    configure_logging(log_level)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate a signing secret for JWT_SECRET_KEY.

    Copy the output to your .env file.
    """
    # 64 random bytes, well above the 32 byte HS256 minimum
    jwt_secret = secrets.token_urlsafe(64)

    console.print("\n[bold green]Tollgate Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={jwt_secret}")
    console.print("=" * 60)
    console.print(
        "[yellow]Keep this secret secure and never commit it "
        "to version control![/yellow]\n"
    )


def _parse_claims(pairs: list[str]) -> dict[str, object]:
    """Parse ``key=value`` options; values are read as JSON when possible."""
    claims: dict[str, object] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            msg = f"Expected key=value, got {pair!r}"
            raise typer.BadParameter(msg, param_hint="--claim")
        try:
            claims[key] = json.loads(value)
        except json.JSONDecodeError:
            claims[key] = value
    return claims


def _load_service() -> JWTService:
    try:
        return get_jwt_service()
    except ValidationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=2) from e
    except TokenConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(e.message)}")
        raise typer.Exit(code=2) from e


@token_app.command("issue")
def issue_token(
    subject: str = typer.Argument(..., help="Principal the token is issued for"),
    claim: list[str] = typer.Option(
        [],
        "--claim",
        "-c",
        help="Extra access token claim as key=value (repeatable)",
    ),
    refresh: bool = typer.Option(
        False,
        "--refresh",
        help="Issue a refresh token instead of an access token",
    ),
) -> None:
    """Issue a signed token and print it."""
    claims = _parse_claims(claim)
    if refresh and claims:
        msg = "Refresh tokens carry no extra claims"
        raise typer.BadParameter(msg, param_hint="--claim")

    service = _load_service()
    try:
        if refresh:
            token = service.create_refresh_token(subject)
        else:
            token = service.create_access_token(subject, claims)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    typer.echo(token)


@token_app.command("inspect")
def inspect_token(
    token: str = typer.Argument(..., help="Token to verify, prefix allowed"),
) -> None:
    """Verify a token and print its claims."""
    service = _load_service()
    result = service.verify_token(token)

    if isinstance(result, TokenRejected):
        console.print(
            f"[red]{result.reason}[/red]: {escape(result.error.message)}"
        )
        raise typer.Exit(code=1)

    claims = result.claims
    console.print("[bold green]valid[/bold green]")
    console.print(f"[cyan]jti[/cyan]={claims.token_id}")
    console.print(f"[cyan]sub[/cyan]={escape(claims.subject)}")
    console.print(f"[cyan]iat[/cyan]={claims.issued_at.isoformat()}")
    console.print(f"[cyan]exp[/cyan]={claims.expires_at.isoformat()}")
    for key, value in claims.claims.items():
        console.print(f"[cyan]{escape(key)}[/cyan]={escape(json.dumps(value))}")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()

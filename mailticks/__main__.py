import sys
from email.utils import parseaddr

import click

from mailticks.cli import (
    handle_smtp_password,
    print_green,
    print_red,
    print_yellow,
)
from mailticks.common import build_instrumentor
from mailticks.config import load_config
from mailticks.doctor import check_config
from mailticks.error_handler import handle_error
from mailticks.exceptions import MailticksError, ValidationError
from mailticks.log import init_logger, logger
from mailticks.models import DetailLevel


@click.group()
def cli():
    pass


@cli.command()
@click.option(
    "-c",
    "--config-path",
    "config_path",
    type=str,
    required=False,
    help="Path to configuration file",
)
@click.option(
    "--to",
    "to",
    type=str,
    required=True,
    multiple=True,
    help="Recipient, e.g. 'Jane <jane@example.com>'. Can be repeated.",
)
@click.option("--cc", type=str, multiple=True, help="Cc recipient")
@click.option("--bcc", type=str, multiple=True, help="Bcc recipient")
@click.option("-s", "--subject", type=str, required=True, help="The subject")
@click.option("--body", type=str, required=False, help="The message body")
@click.option(
    "--body-file",
    type=click.File("r"),
    required=False,
    help="Read the message body from a file",
)
@click.option(
    "--detail-level",
    type=click.Choice([level.value for level in DetailLevel]),
    required=False,
    help="Override the analytics detail level of the config",
)
@click.option(
    "--smtp-pass", type=str, required=False, help="The SMTP password"
)
@click.option("--ask-smtp-pass", is_flag=True, help="Ask for SMTP password")
def send(
    config_path: str | None,
    to: tuple[str, ...],
    cc: tuple[str, ...],
    bcc: tuple[str, ...],
    subject: str,
    body: str | None,
    body_file,
    detail_level: str | None,
    smtp_pass: str | None,
    ask_smtp_pass: bool,
):
    """
    Send a message through the configured SMTP server and record
    its telemetry.
    """
    try:
        config = load_config(config_path)
        init_logger(config)
        handle_smtp_password(config, ask_smtp_pass, smtp_pass)
        if detail_level:
            config.detail_level = DetailLevel(detail_level)

        if (body is None) == (body_file is None):
            raise ValidationError(
                "Exactly one of --body and --body-file must be given"
            )
        if body_file is not None:
            body = body_file.read()

        instrumentor, provider = build_instrumentor(config)
        mailer = instrumentor.sender
        for add, addresses in (
            (mailer.add_address, to),
            (mailer.add_cc, cc),
            (mailer.add_bcc, bcc),
        ):
            for address in addresses:
                name, addr = parseaddr(address)
                if not addr:
                    raise ValidationError(f"Invalid address: {address}")
                add(addr, name)
        mailer.subject = subject
        mailer.body = body or ""

        logger.info(
            f"Sending '{subject}' to "
            f"{len(mailer.all_recipients())} recipient(s)"
        )
        try:
            sent = instrumentor.send()
        finally:
            provider.shutdown()
    except MailticksError as e:
        handle_error(e, exit_on_error=True)
        return

    if sent:
        print_green("Message sent")
    else:
        print_red(f"Message not sent: {mailer.error_info}")
        sys.exit(1)


@cli.command()
@click.option(
    "-c",
    "--config-path",
    "config_path",
    type=str,
    required=False,
    help="Path to configuration file",
)
def doctor(config_path: str | None):
    """
    Check the config for problems and risky telemetry settings.
    """
    try:
        config = load_config(config_path)
    except MailticksError as e:
        handle_error(e, exit_on_error=True)
        return

    report = check_config(config)
    print(f"Detail level: {report['detail_level']}")
    print(f"Event sink: {report['event_sink']}")
    for error in report["errors"]:
        print_red(f"ERROR   {error['field']}: {error['message']}")
    for warning in report["warnings"]:
        print_yellow(f"WARNING {warning['field']}: {warning['message']}")
    if report["errors"]:
        sys.exit(1)
    if not report["warnings"]:
        print_green("No problems found")


if __name__ == "__main__":
    cli()

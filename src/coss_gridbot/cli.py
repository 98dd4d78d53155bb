#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright (C) 2023 Benjamin Thomas Schwertfeger
# GitHub: https://github.com/btschwertfeger
#

import sys
from logging import DEBUG, INFO, WARNING, basicConfig, getLogger
from typing import Any

from click import BOOL, FLOAT, INT, STRING, Context, echo, pass_context
from cloup import HelpFormatter, HelpTheme, Style, group, option
from pydantic import ValidationError

HELP_THEME = HelpFormatter.settings(
    theme=HelpTheme(
        invoked_command=Style(fg="bright_yellow"),
        heading=Style(fg="bright_white", bold=True),
        constraint=Style(fg="magenta"),
        col1=Style(fg="bright_yellow"),
    ),
)


def print_version(ctx: Context, param: Any, value: Any) -> None:  # noqa: ANN401, ARG001
    """Prints the version of the package"""
    if not value or ctx.resilient_parsing:
        return
    from importlib.metadata import (  # noqa: PLC0415 # pylint: disable=import-outside-toplevel
        version,
    )

    echo(version("coss-gridbot"))
    ctx.exit()


def ensure_larger_than_zero(
    ctx: Context,
    param: Any,  # noqa: ANN401
    value: Any,  # noqa: ANN401
) -> Any:  # noqa: ANN401
    """Ensure the value is larger than 0"""
    if value <= 0:
        ctx.fail(f"Value for option '{param.name}' must be larger than 0")
    return value


@group(
    context_settings={
        "auto_envvar_prefix": "COSS",
        "help_option_names": ["-h", "--help"],
    },
    formatter_settings=HELP_THEME,
    no_args_is_help=True,
)
@option(
    "--version",
    is_flag=True,
    callback=print_version,
    expose_value=False,
    is_eager=True,
)
@option(
    "--api-public-key",
    required=True,
    help="The COSS API public key",
    type=STRING,
)
@option(
    "--api-secret-key",
    required=True,
    type=STRING,
    help="The COSS API secret key",
)
@option(
    "-v",
    "--verbose",
    count=True,
    help="Increase the verbosity of output. Use -vv for even more verbosity.",
)
@pass_context
def cli(ctx: Context, **kwargs: dict) -> None:
    """
    Command-line interface entry point
    """
    ctx.ensure_object(dict)
    ctx.obj |= kwargs

    verbosity = kwargs.get("verbose", 0)

    basicConfig(
        format="%(asctime)s %(levelname)8s | %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
        level=INFO if verbosity == 0 else DEBUG,
    )

    if verbosity > 1:  # type: ignore[operator]
        getLogger("requests").setLevel(DEBUG)
        getLogger("urllib3").setLevel(DEBUG)
    else:
        getLogger("requests").setLevel(WARNING)
        getLogger("urllib3").setLevel(WARNING)


@cli.command(
    context_settings={
        "auto_envvar_prefix": "COSS_RUN",
        "help_option_names": ["-h", "--help"],
    },
    formatter_settings=HELP_THEME,
)
@option(
    "--name",
    required=False,
    type=STRING,
    default="coss-gridbot",
    help="The name of the bot.",
)
@option(
    "--pair",
    required=True,
    type=STRING,
    help="The pair to trade, e.g. ETH_USDT.",
)
@option(
    "--upper-limit",
    required=True,
    type=STRING,
    help="The highest price of the grid.",
)
@option(
    "--lower-limit",
    required=True,
    type=STRING,
    help="The lowest price of the grid.",
)
@option(
    "--order-amount",
    required=True,
    type=STRING,
    help="The base currency amount of each order.",
)
@option(
    "--number-of-grids",
    required=True,
    type=INT,
    callback=ensure_larger_than_zero,
    help="The number of divisions between the lower and upper limit.",
)
@option(
    "--poll-interval",
    required=False,
    type=FLOAT,
    default=10.0,
    callback=ensure_larger_than_zero,
    help="Seconds between two order status checks.",
)
@option(
    "--rollback/--no-rollback",
    required=False,
    type=BOOL,
    default=True,
    help="Cancel already placed orders if placing the grid fails.",
)
@option(
    "--telegram-token",
    required=False,
    type=STRING,
    help="The telegram token to use.",
)
@option(
    "--telegram-chat-id",
    required=False,
    type=STRING,
    help="The telegram chat ID to use.",
)
@pass_context
def run(ctx: Context, **kwargs: dict) -> None:
    """Place the grid and monitor its orders"""
    # pylint: disable=import-outside-toplevel
    from coss_gridbot.core.bot import Bot  # noqa: PLC0415
    from coss_gridbot.models.configuration import (  # noqa: PLC0415
        BotConfigDTO,
        GridConfigDTO,
        NotificationConfigDTO,
        TelegramConfigDTO,
    )

    ctx.obj |= kwargs

    try:
        bot_config = BotConfigDTO(
            name=kwargs["name"],
            api_public_key=ctx.obj["api_public_key"],
            api_secret_key=ctx.obj["api_secret_key"],
            poll_interval=kwargs["poll_interval"],
            rollback_on_failure=kwargs["rollback"],
            grid=GridConfigDTO(
                pair=kwargs["pair"],
                upper_limit=kwargs["upper_limit"],
                lower_limit=kwargs["lower_limit"],
                order_amount=kwargs["order_amount"],
                number_of_grids=kwargs["number_of_grids"],
            ),
        )
    except ValidationError as exc:
        ctx.fail(f"Invalid configuration: {exc}")

    notification_config = NotificationConfigDTO(
        telegram=TelegramConfigDTO(
            token=kwargs.get("telegram_token"),
            chat_id=kwargs.get("telegram_chat_id"),
        ),
    )

    Bot(bot_config=bot_config, notification_config=notification_config).run()


@cli.command(
    context_settings={
        "auto_envvar_prefix": "COSS_CANCEL",
        "help_option_names": ["-h", "--help"],
    },
    formatter_settings=HELP_THEME,
)
@option(
    "--pair",
    required=True,
    type=STRING,
    help="The pair of which all open orders should be cancelled.",
)
@option(
    "-f",
    "--force",
    required=False,
    type=BOOL,
    default=False,
    is_flag=True,
    show_default=True,
)
@pass_context
def cancel(ctx: Context, **kwargs: dict) -> None:
    """Cancel all open orders of a pair."""
    ctx.obj |= kwargs
    if not ctx.obj["force"]:
        print("Not canceling -f is required!")  # noqa: T201
        sys.exit(1)

    # pylint: disable=import-outside-toplevel
    from coss_gridbot.adapters.exchanges.coss import (  # noqa: PLC0415
        CossExchangeRESTServiceAdapter,
    )
    from coss_gridbot.models.exchange import Credentials  # noqa: PLC0415

    rest_api = CossExchangeRESTServiceAdapter(
        credentials=Credentials(
            public_key=ctx.obj["api_public_key"],
            secret_key=ctx.obj["api_secret_key"],
        ),
    )
    for order in rest_api.list_orders(pair=ctx.obj["pair"]):
        if order.status.is_terminal:
            continue
        echo(rest_api.cancel_order(pair=order.order_symbol, order_id=order.order_id))

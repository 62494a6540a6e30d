"""Minimal example shipping stdlib logging records to Graylog."""

from __future__ import annotations

import time

import gelfwriter


def main() -> None:
    writer = gelfwriter.configure(
        {
            "writer": {
                "address": "localhost:12201",
                "facility": "gelfwriter-demo",
                "compression_type": "zlib",
            },
            "handler": {"level": "INFO"},
        }
    )

    logger = gelfwriter.get_logger("examples.orders")
    logger.setLevel("INFO")
    for order_id in range(1, 4):
        logger.info("processed order %s", order_id, extra={"order_id": order_id, "total": order_id * 19.99})
        time.sleep(0.1)

    writer.notice("batch finished", extra={"_orders": 3})
    writer.write("multi-line report\nline two\nline three", file=__file__, line=28)
    gelfwriter.shutdown()


if __name__ == "__main__":
    main()

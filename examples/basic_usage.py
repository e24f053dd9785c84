"""Tour of the gelflog client against a Graylog GELF UDP input."""

from __future__ import annotations

import logging

import gelflog
from gelflog import Graylog


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    with Graylog(address="graylog.server.address", host="my-web-project.com", node="dev.log.test") as graylog:
        graylog.log("String line log")
        graylog.log({"code": 1245, "label": "label"})
        graylog.log({"code": 1245, "label": "label"}, graylog.level.DEBUG)
        graylog.log({"code": 1245, "label": "label", "level": 6})
        graylog.log({"code": 1245, "label": "label", "level": graylog.level.ALERT})
        graylog.log({"code": 1245, "label": "label", "level": "error"})

        try:
            raise RuntimeError("test error")
        except RuntimeError as exc:
            graylog.error(exc)
            graylog.error({"message": "exec test error", "error": exc})

        graylog.info("info")
        graylog.debug("debug")
        graylog.emergency("emergency")
        graylog.alert("alert")
        graylog.critical("critical")
        graylog.notice("notice")
        graylog.flush()

    gelflog.configure({"server": {"address": "graylog.server.address"}, "identity": {"node": "dev.log.test"}})
    logger = gelflog.get_logger("examples.orders", logging.INFO)
    logger.info("processed order", extra={"order_id": 42, "total": 19.99})
    gelflog.shutdown()


if __name__ == "__main__":
    main()

import logging
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler

from bab_deploy.config.logging_config import get_script_logger, log_verification, setup_logger
from bab_deploy.verification import VerificationResult


def test_script_logger_handlers(tmp_path):
    logger = get_script_logger("verify_bab", log_dir=tmp_path)

    kinds = {type(h) for h in logger.handlers}
    assert kinds == {logging.StreamHandler, TimedRotatingFileHandler, RotatingFileHandler}
    assert (tmp_path / "verify_bab.log").exists()
    assert (tmp_path / "verify_bab_errors.log").exists()


def test_package_logger_shares_handlers(tmp_path):
    logger = setup_logger("verify_bab", log_dir=tmp_path)

    logging.getLogger("bab_deploy.verification.driver").info("from the driver")
    for handler in logger.handlers:
        handler.flush()

    assert "from the driver" in (tmp_path / "verify_bab.log").read_text()


def test_repeated_setup_keeps_handlers(tmp_path):
    first = setup_logger("verify_bab", log_dir=tmp_path)
    count = len(first.handlers)

    assert setup_logger("verify_bab", log_dir=tmp_path) is first
    assert len(first.handlers) == count


def test_console_only(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    logger = setup_logger("verify_bab", log_dir=False)

    assert len(logger.handlers) == 1
    assert list(tmp_path.iterdir()) == []


def test_debug_switches_level():
    assert get_script_logger("verify_bab", debug=True, log_dir=False).level == logging.DEBUG


def test_errors_go_to_error_log(tmp_path):
    logger = setup_logger("verify_bab", log_dir=tmp_path, console=False)
    logger.info("fine")
    logger.error("broken")
    for handler in logger.handlers:
        handler.flush()

    errors = (tmp_path / "verify_bab_errors.log").read_text()
    assert "broken" in errors
    assert "fine" not in errors


def test_log_verification_line(caplog):
    logger = logging.getLogger("verify_bab")
    result = VerificationResult(
        address="0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
        contract="contracts/BAB/BAB.sol:BAB",
        network="bsc",
        message="Pass - Verified",
        guid="abc123",
    )

    with caplog.at_level(logging.INFO, logger="verify_bab"):
        log_verification(logger, result)

    assert "VERIFIED | contracts/BAB/BAB.sol:BAB | 0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed | bsc | GUID: abc123" in caplog.text

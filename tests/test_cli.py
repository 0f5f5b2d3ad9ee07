"""
CLI Tests

Tests for seed validation, config wiring, and exit codes of `sitecrawl`.
"""

from unittest.mock import patch

from sitecrawler import cli


def test_missing_url_fails_without_crawling(capsys):
    with patch.object(cli, "CrawlEngine") as engine_cls:
        assert cli.main([]) == 2

    engine_cls.assert_not_called()
    assert "Please Provide 'One' Web Domain URL in the Terminal." in capsys.readouterr().err


def test_invalid_url_fails_without_crawling(capsys):
    with patch.object(cli, "CrawlEngine") as engine_cls:
        assert cli.main(["//"]) == 2

    engine_cls.assert_not_called()
    assert "Invalid URL: The Given Uri is not valid: //" in capsys.readouterr().err


def test_seed_error_is_reported_once_on_stderr(capsys):
    with patch.object(cli, "CrawlEngine"):
        assert cli.main(["http://example.com"]) == 2

    captured = capsys.readouterr()
    assert captured.err.count("The Given Uri is not valid") == 1
    assert "The Given Uri is not valid" not in captured.out


def test_non_https_url_fails(capsys):
    with patch.object(cli, "CrawlEngine") as engine_cls:
        assert cli.main(["http://www.snapchat.com"]) == 2

    engine_cls.assert_not_called()
    assert "The Given Uri is not valid: http://www.snapchat.com" in capsys.readouterr().err


def test_successful_run_uses_seed_host_and_concurrency():
    with patch.object(cli, "CrawlEngine") as engine_cls:
        engine_cls.return_value.run.return_value = {"admitted": 1, "fetched_ok": 1}
        assert cli.main(["https://Example.com", "--concurrency", "5"]) == 0

    config = engine_cls.call_args.args[0]
    assert config.concurrency == 5
    engine_cls.return_value.run.assert_called_once_with("https://example.com/", "example.com", 5)


def test_seed_from_config_file(tmp_path):
    config_path = tmp_path / "crawl.yaml"
    config_path.write_text("seed: https://example.org/start\nconcurrency: 2\n", encoding="utf-8")

    with patch.object(cli, "CrawlEngine") as engine_cls:
        engine_cls.return_value.run.return_value = {}
        assert cli.main(["--config", str(config_path)]) == 0

    engine_cls.return_value.run.assert_called_once_with("https://example.org/start", "example.org", 2)


def test_bad_config_exits_with_error(tmp_path, capsys):
    config_path = tmp_path / "crawl.yaml"
    config_path.write_text("concurrency: 0\n", encoding="utf-8")

    with patch.object(cli, "CrawlEngine") as engine_cls:
        assert cli.main(["https://example.com", "--config", str(config_path)]) == 2

    engine_cls.assert_not_called()
    assert "concurrency must be > 0" in capsys.readouterr().err


def test_crawl_failure_returns_one():
    with patch.object(cli, "CrawlEngine") as engine_cls:
        engine_cls.return_value.run.side_effect = RuntimeError("unexpected")
        assert cli.main(["https://example.com"]) == 1


def test_keyboard_interrupt_returns_130():
    with patch.object(cli, "CrawlEngine") as engine_cls:
        engine_cls.return_value.run.side_effect = KeyboardInterrupt
        assert cli.main(["https://example.com"]) == 130


def test_log_file_is_written(tmp_path):
    log_path = tmp_path / "logs" / "crawl.log"

    with patch.object(cli, "CrawlEngine") as engine_cls:
        engine_cls.return_value.run.return_value = {"admitted": 1}
        assert cli.main(["https://example.com", "--log_file", str(log_path)]) == 0

    content = log_path.read_text(encoding="utf-8")
    assert "Starting crawl for domain: example.com" in content
    assert "Crawl completed for domain: example.com" in content

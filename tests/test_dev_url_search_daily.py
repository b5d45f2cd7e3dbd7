import pytest

from config import settings
from modules.dev_url_scan import ReportSection, RowEntry, ScanReport
from modules.scan_config import ScanConfig, TableSpec
from scheduled_processes.emails.daily import dev_url_search_daily as job

PATTERNS = ("%.wpengine.com%", "%.wpenginepowered.com%")
CONFIG = ScanConfig(
    patterns=PATTERNS,
    tables=(
        TableSpec("wp_postmeta", ("meta_value",)),
        TableSpec("wp_redirection_items", ("action_data",)),
    ),
)


@pytest.fixture
def sent(monkeypatch):
    outbox = []
    monkeypatch.setattr(job, "send_email", lambda *args: outbox.append(args))
    return outbox


@pytest.fixture
def site(db, monkeypatch):
    """WordPress site whose identity comes from wp_options."""
    monkeypatch.setattr(settings, "SITE_HOME_URL", "")
    monkeypatch.setattr(settings, "ALERT_EMAIL", "")

    def make(home):
        db.create_table(
            "wp_options",
            ["option_id", "option_name", "option_value"],
            [
                {"option_id": 1, "option_name": "home", "option_value": home},
                {"option_id": 2, "option_name": "admin_email", "option_value": "admin@example.com"},
            ],
        )
        return db

    return make


def _meta_table(db, values):
    db.create_table(
        "wp_postmeta",
        ["meta_id", "post_id", "meta_key", "meta_value"],
        [{"meta_id": i, "post_id": 10 + i, "meta_key": "k", "meta_value": v} for i, v in enumerate(values, 1)],
    )


def _report():
    section = ReportSection(
        table="wp_postmeta",
        column="meta_value",
        total=2,
        row_limit=30,
        rows=[
            RowEntry('Meta ID 1 [post_id=11, meta_key="k"]', ["https://a.wpengine.com/x"], "see https://a.wpengine.com/x"),
            RowEntry('Meta ID 2 [post_id=12, meta_key="k"]', [], "a.wpengine.com/y"),
        ],
    )
    other = ReportSection(table="wp_options", column="option_value", total=1, row_limit=30,
                          rows=[RowEntry("Match", ["https://b.wpengine.com"], "https://b.wpengine.com")])
    return ScanReport(sections=[section, other], total=3)


def test_format_email_text():
    body = job.format_email_text(_report(), "https://www.example.com", "2024-05-01")
    assert body == (
        "Dev URL references found in the database\n"
        "Site: https://www.example.com\n"
        "Date (UTC): 2024-05-01\n"
        "Total matches: 3\n"
        "\n"
        "wp_postmeta.meta_value\n"
        "Total matches: 2 (showing up to 30)\n"
        '- Meta ID 1 [post_id=11, meta_key="k"]\n'
        "  URLs: https://a.wpengine.com/x\n"
        "  Snippet: see https://a.wpengine.com/x\n"
        '- Meta ID 2 [post_id=12, meta_key="k"]\n'
        "  URLs: (not parsed; see snippet)\n"
        "  Snippet: a.wpengine.com/y"
        "\n\n-----------------------------\n\n"
        "wp_options.option_value\n"
        "Total matches: 1 (showing up to 30)\n"
        "- Match\n"
        "  URLs: https://b.wpengine.com\n"
        "  Snippet: https://b.wpengine.com"
    )


def test_format_email_text_appends_errors():
    report = _report()
    report.errors.append("wp_posts: timeout")
    body = job.format_email_text(report, "https://www.example.com", "2024-05-01")
    assert body.endswith("\n\nErrors\n------\nwp_posts: timeout")


def test_format_email_html_escapes_content():
    report = _report()
    report.sections[0].rows[0].snippet = '<script>alert("x")</script>'
    out = job.format_email_html(report, "https://www.example.com", "2024-05-01")
    assert "<script>" not in out
    assert "&lt;script&gt;" in out
    assert "wp_postmeta.meta_value" in out


def test_notify_sends_fixed_subject(sent):
    job.notify(_report(), "https://www.example.com", "2024-05-01", "admin@example.com")
    to, subject, text_body, html_body = sent[0]
    assert to == "admin@example.com"
    assert subject == "[DEV URL DAILY] Daily Dev URL Search Results"
    assert text_body.startswith("Dev URL references found in the database")
    assert html_body.startswith("<html>")


def test_notify_skips_empty_report(sent):
    job.notify(ScanReport(), "https://www.example.com", "2024-05-01", "admin@example.com")
    assert sent == []


def test_run_emails_admin_when_matches_found(site, sent):
    db = site("https://www.example.com")
    _meta_table(db, ["https://mysite.wpengine.com/wp-content/uploads/a.jpg", "clean"])

    report = job.run(db, CONFIG)

    assert report.total == 1
    assert len(sent) == 1
    to, subject, text_body, _ = sent[0]
    assert to == "admin@example.com"
    assert "Site: https://www.example.com" in text_body
    assert "https://mysite.wpengine.com/wp-content/uploads/a.jpg" in text_body


def test_run_on_staging_never_scans(site, sent):
    db = site("https://mysite.wpengine.com")
    _meta_table(db, ["https://mysite.wpengine.com/a.jpg"])

    assert job.run(db, CONFIG) is None
    assert sent == []
    # only the home option lookup touched the database
    assert all("wp_options" in sql for sql, _ in db.statements)


def test_run_force_bypasses_gate(site, sent):
    db = site("https://mysite.wpengine.com")
    _meta_table(db, ["https://mysite.wpengine.com/a.jpg"])
    assert job.run(db, CONFIG, force=True).total == 1
    assert len(sent) == 1


def test_run_without_matches_sends_nothing(site, sent):
    db = site("https://www.example.com")
    _meta_table(db, ["clean", "also clean"])

    report = job.run(db, CONFIG)
    assert not report
    assert sent == []


def test_run_dry_run_prints_but_does_not_send(site, sent, capsys):
    db = site("https://www.example.com")
    _meta_table(db, ["https://mysite.wpengine.com/a.jpg"])

    job.run(db, CONFIG, dry_run=True)
    out = capsys.readouterr().out
    assert "----- EMAIL BODY BEGIN -----" in out
    assert "wp_postmeta.meta_value" in out
    assert sent == []


def test_env_identity_overrides_options(db, sent, monkeypatch):
    monkeypatch.setattr(settings, "SITE_HOME_URL", "https://www.example.org")
    monkeypatch.setattr(settings, "ALERT_EMAIL", "ops@example.org")
    _meta_table(db, ["https://mysite.wpengine.com/a.jpg"])

    job.run(db, CONFIG)
    to, _, text_body, _ = sent[0]
    assert to == "ops@example.org"
    assert "Site: https://www.example.org" in text_body

"""Tests for the command-line interface."""

import json
from dataclasses import replace

from conftest import make_record
from familypoints.cli.main import cli
from familypoints.database.fallback import FALLBACK_KEY, FallbackStore
from familypoints.database.interchange import dumps_state
from familypoints.domain.defaults import default_state


def test_help_does_not_touch_database(cli_runner, tmp_path):
    db_path = tmp_path / "untouched.db"
    result = cli_runner.invoke(cli, ["--db-path", str(db_path), "--help"])

    assert result.exit_code == 0
    assert "household points tracker" in result.output
    assert not db_path.exists()


def test_status_on_fresh_store(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["status"])

    assert result.exit_code == 0
    assert "Ethan" in result.output
    assert "Yoyo" in result.output


def test_log_behavior(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["log", "Ethan", "Chores", "--note", "Dishes"])

    assert result.exit_code == 0
    assert "+10 Ethan: Chores (score: 10)" in result.output

    result = cli_runner.invoke(cli, cli_args + ["log", "child_1", "picky eating"])
    assert result.exit_code == 0
    assert "-5 Ethan: Picky eating (score: 5)" in result.output

    history = cli_runner.invoke(cli, cli_args + ["history", "--child", "Ethan"])
    assert history.exit_code == 0
    assert "(Dishes)" in history.output
    assert "Picky eating" in history.output


def test_log_unknown_child(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["log", "Nobody", "Chores"])

    assert result.exit_code == 1
    assert "User 'Nobody' not found" in result.output


def test_redeem_requires_enough_points(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["redeem", "Ethan", "Snack"])

    assert result.exit_code == 1
    assert "costs 20" in result.output


def test_redeem_reward(cli_runner, cli_args):
    cli_runner.invoke(cli, cli_args + ["log", "Yoyo", "Great grades"])

    result = cli_runner.invoke(cli, cli_args + ["redeem", "Yoyo", "Snack"])

    assert result.exit_code == 0
    assert "Yoyo redeemed Snack for 20 points (score: 0)" in result.output

    history = cli_runner.invoke(cli, cli_args + ["history"])
    assert "Redeemed: Snack" in history.output


def test_items_add_and_list(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["items", "add", "Shouting", "15", "--negative"])
    assert result.exit_code == 0
    assert "Created score item 'Shouting' (-15" in result.output

    listing = cli_runner.invoke(cli, cli_args + ["items", "list"])
    assert "Shouting" in listing.output
    assert "-15" in listing.output


def test_items_remove(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["items", "remove", "Chores"])
    assert result.exit_code == 0

    listing = cli_runner.invoke(cli, cli_args + ["items", "list"])
    assert "Chores" not in listing.output


def test_rewards_add_and_edit(cli_runner, cli_args):
    cli_runner.invoke(cli, cli_args + ["rewards", "add", "Ice cream", "40"])
    result = cli_runner.invoke(cli, cli_args + ["rewards", "edit", "ice cream", "--cost", "35"])
    assert result.exit_code == 0

    listing = cli_runner.invoke(cli, cli_args + ["rewards", "list"])
    assert "Ice cream" in listing.output
    assert "35" in listing.output


def test_users_rename(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["users", "rename", "Yoyo", "Yo-Yo"])
    assert result.exit_code == 0

    listing = cli_runner.invoke(cli, cli_args + ["users", "list"])
    assert "Yo-Yo" in listing.output


def test_mail_flow(cli_runner, cli_args, temp_db):
    result = cli_runner.invoke(cli, cli_args + ["mail", "send", "Ethan", "Thanks for dinner"])
    assert result.exit_code == 0
    assert temp_db.unread_message_count() == 1

    status = cli_runner.invoke(cli, cli_args + ["status"])
    assert "1 unread message." in status.output

    listing = cli_runner.invoke(cli, cli_args + ["mail", "list"])
    assert "1 unread" in listing.output
    assert "Thanks for dinner" in listing.output

    message_id = temp_db.read_all().messages[0].id
    result = cli_runner.invoke(cli, cli_args + ["mail", "read", message_id])
    assert result.exit_code == 0
    assert temp_db.unread_message_count() == 0


def test_parent_cannot_send_mail(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["mail", "send", "Mom & Dad", "Hello"])

    assert result.exit_code == 1
    assert "not a child" in result.output


def test_storage_command(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["storage"])

    assert result.exit_code == 0
    assert "Used:" in result.output
    assert "Quota:" in result.output


def test_prune(cli_runner, cli_args):
    cli_runner.invoke(cli, cli_args + ["log", "Ethan", "Chores"])

    result = cli_runner.invoke(cli, cli_args + ["prune", "30", "--yes"])

    assert result.exit_code == 0
    assert "Deleted 0 records." in result.output


def test_prune_asks_for_confirmation(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["prune", "30"], input="n\n")

    assert result.exit_code == 1
    assert "Aborted" in result.output


def test_export_and_import(cli_runner, cli_args, tmp_path, temp_db):
    cli_runner.invoke(cli, cli_args + ["log", "Ethan", "Chores"])
    backup_file = tmp_path / "backup.json"

    result = cli_runner.invoke(cli, cli_args + ["export", str(backup_file)])
    assert result.exit_code == 0
    document = json.loads(backup_file.read_text(encoding="utf-8"))
    assert len(document["records"]) == 1

    cli_runner.invoke(cli, cli_args + ["log", "Ethan", "Chores"])
    assert len(temp_db.read_all().records) == 2

    result = cli_runner.invoke(cli, cli_args + ["import", str(backup_file), "--yes"])
    assert result.exit_code == 0
    assert len(temp_db.read_all().records) == 1


def test_import_rejects_invalid_backup(cli_runner, cli_args, tmp_path, temp_db):
    cli_runner.invoke(cli, cli_args + ["log", "Ethan", "Chores"])
    bad_file = tmp_path / "bad.json"
    bad_file.write_text('{"scoreItems": []}', encoding="utf-8")

    result = cli_runner.invoke(cli, cli_args + ["import", str(bad_file), "--yes"])

    assert result.exit_code == 1
    assert "Invalid backup format" in result.output
    assert len(temp_db.read_all().records) == 1


def test_export_to_stdout(cli_runner, cli_args):
    result = cli_runner.invoke(cli, cli_args + ["export", "-"])

    assert result.exit_code == 0
    assert '"version": "2.0"' in result.output


def test_commands_create_store_on_new_file(cli_runner, tmp_path):
    args = ["--db-path", str(tmp_path / "new.db"), "--fallback-path", str(tmp_path / "fb.json")]

    result = cli_runner.invoke(cli, args + ["log", "Ethan", "Chores"])
    assert result.exit_code == 0
    assert "Warning" not in result.output

    history = cli_runner.invoke(cli, args + ["history", "--child", "Ethan"])
    assert "Chores" in history.output
    assert not (tmp_path / "fb.json").exists()


def test_import_rejects_non_utf8_file(cli_runner, cli_args, tmp_path):
    bad_file = tmp_path / "bad.json"
    bad_file.write_bytes(b"\xff\xfe")

    result = cli_runner.invoke(cli, cli_args + ["import", str(bad_file), "--yes"])

    assert result.exit_code == 1
    assert "Invalid backup format" in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)


def test_invalid_quota_env_reports_error(cli_runner, cli_args):
    result = cli_runner.invoke(
        cli, cli_args + ["status"], env={"FAMILYPOINTS_QUOTA_BYTES": "lots"}
    )

    assert result.exit_code == 1
    assert "FAMILYPOINTS_QUOTA_BYTES" in result.output
    assert not isinstance(result.exception, ValueError)


def test_restore_fallback(cli_runner, cli_args, tmp_path, temp_db):
    state = replace(default_state(), records=(make_record("r1"),))
    FallbackStore(str(tmp_path / "fallback.json")).set_item(FALLBACK_KEY, dumps_state(state))

    result = cli_runner.invoke(cli, cli_args + ["restore-fallback", "--yes"])

    assert result.exit_code == 0
    assert "1 records" in result.output
    assert temp_db.read_all() == state

    again = cli_runner.invoke(cli, cli_args + ["restore-fallback", "--yes"])
    assert "No snapshot in fallback storage." in again.output

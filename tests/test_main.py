"""Tests for the command line entry point."""

import json
import logging
import os
from unittest.mock import patch

import pytest

from bank_ocr_parser.config.settings import Settings
from bank_ocr_parser.utils.exceptions import (
    InvalidConfigurationError,
    UnsupportedVariantError,
    ValidationError,
)
from bank_ocr_parser.utils.logger import setup_logging
from main import StatementProcessor, load_settings, main, parse_arguments


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the console handler installed by main()."""
    yield
    setup_logging(log_level="INFO", console_output=False)


class TestParseArguments:
    """Test cases for argument parsing."""

    def test_defaults(self):
        """Test default stage and format."""
        args = parse_arguments(["--text-file", "statement.txt"])

        assert args.text_file == "statement.txt"
        assert args.stage == "categorize"
        assert args.bank is None
        assert args.output_format is None
        assert args.config is None
        assert args.password is None

    def test_input_required(self):
        """Test that one input source is required."""
        with pytest.raises(SystemExit):
            parse_arguments(["--bank", "HDFC"])

    def test_inputs_are_exclusive(self):
        """Test that text and PDF inputs cannot be combined."""
        with pytest.raises(SystemExit):
            parse_arguments(["--text-file", "a.txt", "--pdf-file", "a.pdf"])

    def test_xlsx_requires_categorize(self):
        """Test that Excel output is only offered for categorized transactions."""
        with pytest.raises(SystemExit):
            parse_arguments(["--text-file", "a.txt", "--stage", "clean", "--format", "xlsx"])


class TestStatementProcessor:
    """Test cases for StatementProcessor."""

    def test_categorize_text(self, sample_settings, hdfc_text_file, expected_categorized):
        """Test the default categorized text output."""
        output = StatementProcessor(sample_settings).process_file(hdfc_text_file, "HDFC")

        assert output.endswith("hdfc_statement_categorized.txt")
        with open(output, encoding="utf-8") as f:
            assert f.read() == expected_categorized["HDFC"]

    @pytest.mark.parametrize("stage", ["clean", "simplify"])
    def test_stage_outputs(self, sample_settings, hdfc_text_file, stage):
        """Test that intermediate stages are written to their own files."""
        output = StatementProcessor(sample_settings).process_file(hdfc_text_file, "hdfc", stage=stage)

        assert output.endswith(f"hdfc_statement_{stage}.txt")

    def test_json_records(self, sample_settings, hdfc_text_file):
        """Test JSON output with records and counters."""
        output = StatementProcessor(sample_settings).process_file(
            hdfc_text_file, "HDFC", output_format="json"
        )

        with open(output, encoding="utf-8") as f:
            data = json.load(f)
        assert data["bank"] == "HDFC"
        assert [record["type"] for record in data["transactions"]] == ["DEBIT", "DEBIT", "CREDIT"]
        assert data["stats"]["records_merged"] == 3

    def test_excel_report(self, sample_settings, hdfc_text_file):
        """Test Excel output for categorized transactions."""
        output = StatementProcessor(sample_settings).process_file(
            hdfc_text_file, "HDFC", output_format="xlsx"
        )

        assert output.endswith(".xlsx")

    def test_unsupported_bank(self, sample_settings, hdfc_text_file):
        """Test that unknown bank codes are raised, not swallowed."""
        with pytest.raises(UnsupportedVariantError):
            StatementProcessor(sample_settings).process_file(hdfc_text_file, "SBI")

    def test_missing_file(self, sample_settings, temp_dir):
        """Test that a missing input is logged and reported as a failure."""
        processor = StatementProcessor(sample_settings)
        assert processor.process_file(str(temp_dir / "missing.txt"), "HDFC") is None

    def test_pdf_input(self, sample_settings, temp_dir, hdfc_ocr_text):
        """Test that PDF input goes through the text extractor."""
        pdf_file = temp_dir / "statement.pdf"
        pdf_file.write_bytes(b"%PDF-1.4")
        processor = StatementProcessor(sample_settings)

        with patch.object(processor.extractor, "extract_text", return_value=hdfc_ocr_text) as extract:
            output = processor.process_file(str(pdf_file), "HDFC", password="secret")

        extract.assert_called_once_with(str(pdf_file), "secret")
        assert output.endswith("statement_categorized.txt")

    def test_batch(self, sample_settings, temp_dir, sample_statements):
        """Test that every statement file in a directory is processed."""
        batch_dir = temp_dir / "batch"
        batch_dir.mkdir()
        (batch_dir / "a.txt").write_text(sample_statements["KOTAK"], encoding="utf-8")
        (batch_dir / "b.txt").write_text(sample_statements["KOTAK"], encoding="utf-8")
        (batch_dir / "notes.md").write_text("ignored", encoding="utf-8")

        outputs = StatementProcessor(sample_settings).process_batch(str(batch_dir), "KOTAK")

        assert len(outputs) == 2

    def test_invalid_settings_rejected(self, temp_dir):
        """Test that a malformed tolerance fails before any file is read."""
        settings = Settings(reconciliation_tolerance="one cent", output_dir=str(temp_dir))

        with pytest.raises(InvalidConfigurationError, match="reconciliation_tolerance"):
            StatementProcessor(settings)

    def test_totals_logged(self, sample_settings, hdfc_text_file, caplog):
        """Test that the categorized run reports its debit and credit totals."""
        with caplog.at_level(logging.INFO, logger="bank_ocr_parser"):
            StatementProcessor(sample_settings).process_file(hdfc_text_file, "HDFC")

        assert "3 transactions, debits 1,650.00, credits 25,000.00" in caplog.text

    def test_undecodable_text_file(self, sample_settings, temp_dir):
        """Test that a text file that is not UTF-8 is reported as a failure."""
        bad_file = temp_dir / "latin1.txt"
        bad_file.write_bytes(b"01/04/23 CAF\xe9 100.00 900.00\n")

        assert StatementProcessor(sample_settings).process_file(str(bad_file), "HDFC") is None

    def test_batch_continues_after_undecodable_file(self, sample_settings, temp_dir, sample_statements):
        """Test that one undecodable file does not stop the batch."""
        batch_dir = temp_dir / "batch"
        batch_dir.mkdir()
        (batch_dir / "a_bad.txt").write_bytes(b"01-04-2023 CAF\xe9 10.00(Dr)\n")
        (batch_dir / "b_good.txt").write_text(sample_statements["KOTAK"], encoding="utf-8")

        outputs = StatementProcessor(sample_settings).process_batch(str(batch_dir), "KOTAK")

        assert len(outputs) == 1
        assert outputs[0].endswith("b_good_categorized.txt")

    def test_batch_missing_directory(self, sample_settings, temp_dir):
        """Test that a missing batch directory is a validation error."""
        with pytest.raises(ValidationError):
            StatementProcessor(sample_settings).process_batch(str(temp_dir / "missing"), "HDFC")


class TestLoadSettings:
    """Test cases for building settings from a config file."""

    def test_without_config_file(self):
        """Test that the environment alone is used without a file."""
        with patch.dict(os.environ, {"DEFAULT_BANK": "ICICI"}):
            assert load_settings().default_bank == "ICICI"

    def test_config_file_overrides(self, temp_dir):
        """Test that file values win over the environment."""
        config_file = temp_dir / "parser.json"
        config_file.write_text(
            json.dumps({"default_bank": "KOTAK", "reconciliation_tolerance": "0.05"}),
            encoding="utf-8",
        )

        with patch.dict(os.environ, {"DEFAULT_BANK": "ICICI"}):
            settings = load_settings(str(config_file))

        assert settings.default_bank == "KOTAK"
        assert settings.reconciliation_tolerance == "0.05"

    @pytest.mark.parametrize("content, message", [
        ('{"default_bank": "KOTAK", "chunk_size": 10}', "chunk_size"),
        ("not json", "Cannot read"),
        ('["KOTAK"]', "JSON object"),
    ])
    def test_bad_config_file(self, temp_dir, content, message):
        """Test that unusable config files are configuration errors."""
        config_file = temp_dir / "parser.json"
        config_file.write_text(content, encoding="utf-8")

        with pytest.raises(InvalidConfigurationError, match=message):
            load_settings(str(config_file))

    def test_missing_config_file(self, temp_dir):
        """Test that a missing config file is a configuration error."""
        with pytest.raises(InvalidConfigurationError):
            load_settings(str(temp_dir / "missing.json"))

class TestMain:
    """Test cases for main exit codes."""

    def test_success(self, hdfc_text_file, temp_dir):
        """Test a successful run."""
        exit_code = main([
            "--text-file", hdfc_text_file, "--bank", "HDFC", "--output-dir", str(temp_dir / "out")
        ])

        assert exit_code == 0
        assert (temp_dir / "out" / "hdfc_statement_categorized.txt").exists()

    def test_unsupported_bank(self, hdfc_text_file, temp_dir):
        """Test that an unsupported bank is a configuration error."""
        assert main(["--text-file", hdfc_text_file, "--bank", "SBI", "--output-dir", str(temp_dir)]) == 2

    def test_blank_password(self, hdfc_text_file, temp_dir):
        """Test that a blank password is rejected."""
        assert main(["--pdf-file", hdfc_text_file, "--password", " ", "--output-dir", str(temp_dir)]) == 2

    def test_missing_file(self, temp_dir):
        """Test that a failed run exits with 1."""
        assert main(["--text-file", str(temp_dir / "missing.txt"), "--output-dir", str(temp_dir)]) == 1

    def test_missing_batch_directory(self, temp_dir):
        """Test that a missing batch directory is a configuration error."""
        assert main(["--batch-dir", str(temp_dir / "missing"), "--output-dir", str(temp_dir)]) == 2

    def test_config_file(self, temp_dir, sample_statements):
        """Test that bank, format and output directory come from the config file."""
        statement = temp_dir / "kotak.txt"
        statement.write_text(sample_statements["KOTAK"], encoding="utf-8")
        config_file = temp_dir / "parser.json"
        config_file.write_text(json.dumps({
            "default_bank": "KOTAK",
            "output_format": "json",
            "output_dir": str(temp_dir / "out"),
        }), encoding="utf-8")

        assert main(["--text-file", str(statement), "--config", str(config_file)]) == 0

        with open(temp_dir / "out" / "kotak_categorized.json", encoding="utf-8") as f:
            assert json.load(f)["bank"] == "KOTAK"

    def test_config_xlsx_needs_categorize(self, hdfc_text_file, temp_dir):
        """Test that a configured xlsx format still requires the categorize stage."""
        config_file = temp_dir / "parser.json"
        config_file.write_text(json.dumps({"output_format": "xlsx"}), encoding="utf-8")

        assert main([
            "--text-file", hdfc_text_file, "--stage", "clean", "--config", str(config_file)
        ]) == 2

    def test_invalid_tolerance(self, hdfc_text_file, temp_dir):
        """Test that a malformed tolerance in the environment is a configuration error."""
        with patch.dict(os.environ, {"RECONCILIATION_TOLERANCE": "abc"}):
            assert main(["--text-file", hdfc_text_file, "--output-dir", str(temp_dir)]) == 2

    def test_keyboard_interrupt(self, hdfc_text_file):
        """Test the exit code when interrupted."""
        with patch("main.StatementProcessor", side_effect=KeyboardInterrupt):
            assert main(["--text-file", hdfc_text_file]) == 130

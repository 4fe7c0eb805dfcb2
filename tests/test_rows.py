# -*- coding: utf-8 -*-
import unittest

from parts_ocr.detect import SourceFormat
from parts_ocr.records import PartRecord
from parts_ocr.rows import (
    TEXT_ROW_STRATEGIES,
    fields_to_record,
    is_noise_line,
    is_numeric_token,
    is_row_number,
    parse_column_line,
    parse_csv_line,
    parse_fixed_width_line,
    parse_pipe_line,
    parse_row,
    split_trailing_quantity,
    strip_bullet,
    tokenize_csv,
)


class TestNoiseFilter(unittest.TestCase):

    def test_noise_lines(self):
        for line in ("1 a", "-----", "=====", "_____", "40- 2-1", "40-2-1", "12–3–4",
                     "UNIT NAME  DRAW NO", "NO  PART CODE", "part name", "Quantity 4"):
            with self.subTest(line=line):
                self.assertTrue(is_noise_line(line))

    def test_candidate_lines(self):
        for line in ("1  000-128-2893-16  MAIN BODY UNIT  2", "1, ABC-123, Widget", "10-1-2 extra"):
            with self.subTest(line=line):
                self.assertFalse(is_noise_line(line))

    def test_min_length_is_tunable(self):
        self.assertFalse(is_noise_line("1 a", min_length=3))


class TestTokenHelpers(unittest.TestCase):

    def test_strip_bullet(self):
        self.assertEqual(strip_bullet("•12"), "12")
        self.assertEqual(strip_bullet("● 7"), "7")
        self.assertEqual(strip_bullet("○3"), "3")
        # Only one bullet is removed
        self.assertEqual(strip_bullet("••3"), "•3")
        self.assertEqual(strip_bullet("ABC"), "ABC")

    def test_is_row_number(self):
        self.assertTrue(is_row_number("12"))
        self.assertTrue(is_row_number("•12"))
        self.assertFalse(is_row_number("•ABC"))
        self.assertFalse(is_row_number("1.5"))
        self.assertFalse(is_row_number(""))
        self.assertFalse(is_row_number("••3"))

    def test_is_numeric_token(self):
        self.assertTrue(is_numeric_token("2"))
        self.assertTrue(is_numeric_token("0.5"))
        self.assertFalse(is_numeric_token("M4"))
        self.assertFalse(is_numeric_token(":WDU:"))
        self.assertFalse(is_numeric_token("nan"))

    def test_split_trailing_quantity(self):
        self.assertEqual(split_trailing_quantity("BASE :WDU: 1"), ("BASE :WDU:", "1"))
        self.assertEqual(split_trailing_quantity("SCREW M4"), ("SCREW M4", "1"))
        self.assertEqual(split_trailing_quantity("SPRING 12"), ("SPRING", "12"))

    def test_tokenize_csv(self):
        self.assertEqual(tokenize_csv("1, ABC-123, Part Name, 2, 3"), ["1", "ABC-123", "Part Name", "2", "3"])
        self.assertEqual(tokenize_csv('1, "Bolt, hex", Widget, 2'), ["1", "Bolt, hex", "Widget", "2"])
        self.assertEqual(tokenize_csv("1\tABC\tWidget"), ["1", "ABC", "Widget"])
        self.assertEqual(tokenize_csv("1,,ABC,Widget"), ["1", "ABC", "Widget"])


class TestStrategies(unittest.TestCase):

    def test_pipe_ocr_layout(self):
        record = parse_pipe_line("1 000-102-3574-29 | BASE :WDU: 1")
        self.assertEqual(record, PartRecord(number="1", code="000-102-3574-29", name="BASE :WDU:", qty="1", pmst="3"))

    def test_pipe_without_quantity_and_with_pmst(self):
        record = parse_pipe_line("2 000-111-2222-33 | SCREW M4 | 2")
        self.assertEqual(record.name, "SCREW M4")
        self.assertEqual(record.qty, "1")
        self.assertEqual(record.pmst, "2")

    def test_pipe_multi_token_code(self):
        record = parse_pipe_line("3 ABC 123 | PLATE 4")
        self.assertEqual(record.code, "ABC 123")
        self.assertEqual(record.qty, "4")

    def test_pipe_rejects_incomplete(self):
        self.assertIsNone(parse_pipe_line("000-102-3574-29 | BASE 1"))
        self.assertIsNone(parse_pipe_line("1 000-102-3574-29 |"))

    def test_fixed_width_anchored_on_part_code(self):
        record = parse_fixed_width_line("1  000-128-2893-16  MAIN BODY UNIT  2")
        self.assertEqual(record.number, "1")
        self.assertEqual(record.code, "000-128-2893-16")
        self.assertEqual(record.name, "MAIN BODY UNIT")
        self.assertEqual(record.qty, "2")

    def test_fixed_width_anchor_tolerates_single_space(self):
        record = parse_fixed_width_line("12 000-128-2893-16  COVER")
        self.assertEqual(record.number, "12")
        self.assertEqual(record.name, "COVER")
        self.assertEqual(record.qty, "")

    def test_fixed_width_positional_fallback(self):
        record = parse_fixed_width_line("4  Widget  2")
        self.assertEqual((record.number, record.code, record.name, record.qty), ("4", "", "Widget", "2"))

    def test_generic_field_counts(self):
        three = fields_to_record(["1", "ABC", "Widget"])
        self.assertEqual((three.qty, three.pmst), ("1", "3"))
        four = fields_to_record(["1", "ABC", "Widget", "5"])
        self.assertEqual((four.qty, four.pmst), ("5", "3"))
        five = fields_to_record(["1", "ABC", "Widget", "5", "2", "extra"])
        self.assertEqual((five.qty, five.pmst), ("5", "2"))
        self.assertIsNone(fields_to_record(["1", "ABC"]))

    def test_csv_line(self):
        record = parse_csv_line('7, "Bolt, hex", Fastener, 6')
        self.assertEqual(record, PartRecord(number="7", code="Bolt, hex", name="Fastener", qty="6", pmst="3"))

    def test_column_line_maps_by_count(self):
        record = parse_column_line("2  ABC-124  Gadget  5  1")
        self.assertEqual(record, PartRecord(number="2", code="ABC-124", name="Gadget", qty="5", pmst="1"))
        self.assertIsNone(parse_column_line("5  Widget"))

    def test_pasted_text_strategy_table(self):
        line = "1  000-128-2893-16  MAIN BODY UNIT  2  1"
        self.assertEqual(parse_row(line, SourceFormat.FIXED_WIDTH).pmst, "3")
        self.assertEqual(parse_row(line, SourceFormat.FIXED_WIDTH, strategies=TEXT_ROW_STRATEGIES).pmst, "1")


class TestParseRow(unittest.TestCase):

    def test_bullet_number_rejected(self):
        """A bullet followed by text is not a row number."""
        self.assertIsNone(parse_row("•ABC  Widget  2", SourceFormat.FIXED_WIDTH))

    def test_bullet_stripped_from_valid_number(self):
        record = parse_row("•12  000-128-2893-16  COVER  1", SourceFormat.FIXED_WIDTH)
        self.assertEqual(record.number, "12")

    def test_noise_rejected_before_strategy(self):
        self.assertIsNone(parse_row("40- 2-1", SourceFormat.FIXED_WIDTH))
        self.assertIsNone(parse_row("NO | PART CODE | QUANTITY", SourceFormat.PIPE_DELIMITED))

    def test_line_is_trimmed(self):
        record = parse_row("   1, ABC, Widget   ", SourceFormat.CSV)
        self.assertEqual(record.name, "Widget")

    def test_non_numeric_rows_logged_at_debug(self):
        with self.assertLogs("parts_ocr.rows", level="DEBUG") as logs:
            self.assertIsNone(parse_row("A1, ABC, Widget", SourceFormat.CSV))
        self.assertIn("non-numeric", logs.output[0])

    def test_four_line_paste_has_no_line_strategy(self):
        with self.assertRaises(ValueError):
            parse_row("1  000-128-2893-16  COVER  1", SourceFormat.FOUR_LINE_PASTE)

    def test_deterministic(self):
        line = "1 000-102-3574-29 | BASE :WDU: 1"
        self.assertEqual(parse_row(line, SourceFormat.PIPE_DELIMITED), parse_row(line, SourceFormat.PIPE_DELIMITED))


if __name__ == '__main__':
    unittest.main(verbosity=2)

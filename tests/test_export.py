# -*- coding: utf-8 -*-
import unittest

from parts_ocr.assemble import delete_row, parse_document_text, parse_parts_text
from parts_ocr.export import to_csv
from parts_ocr.records import ParseResult


class TestCsvExport(unittest.TestCase):

    def test_list_shape(self):
        result = parse_document_text("NO  PART CODE  PART NAME  QUANTITY\n1  000-128-2893-16  MAIN BODY UNIT  2\n")
        self.assertEqual(
            to_csv(result),
            "NO,PART CODE,PART NAME,QUANTITY\n1,000-128-2893-16,MAIN BODY UNIT,2\n",
        )

    def test_commas_are_quoted(self):
        result = parse_parts_text('1, 000-128-2893-16, "BOLT, HEX", 4, 2\n')
        self.assertEqual(
            to_csv(result),
            'NO,PART CODE,PART NAME,QUANTITY,PMST\n1,000-128-2893-16,"BOLT, HEX",4,2\n',
        )

    def test_positional_numbers_after_delete(self):
        result = parse_document_text(
            "NO  PART CODE  PART NAME  QUANTITY\n"
            "10  000-128-2893-16  MAIN BODY UNIT  2\n"
            "20  000-128-2893-17  COVER  1\n"
        )
        remaining = ParseResult(headers=result.headers, rows=delete_row(result.rows, 0))
        self.assertIn("\n1,000-128-2893-17,COVER,1\n", to_csv(remaining, positional=True))
        self.assertIn("\n20,000-128-2893-17,COVER,1\n", to_csv(remaining))

    def test_empty_result_has_header_only(self):
        self.assertEqual(to_csv(ParseResult()), "NO,PART CODE,PART NAME,QUANTITY\n")


if __name__ == '__main__':
    unittest.main(verbosity=2)

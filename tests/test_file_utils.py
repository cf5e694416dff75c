"""
Unit tests for the file utilities.
"""

import json
import os
import shutil
import tempfile
import time
import unittest

import pandas as pd

from concrete_strength.utils.file_utils import (
    find_data_file, clean_old_files, save_frame, save_json
)


class TestFileUtils(unittest.TestCase):
    """Test cases for file helpers."""

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def _touch(self, name, mtime):
        path = os.path.join(self.tmp_dir, name)
        open(path, 'w').close()
        os.utime(path, (mtime, mtime))
        return path

    def test_find_data_file_picks_newest(self):
        now = time.time()
        self._touch('old.csv', now - 100)
        newest = self._touch('new.csv', now)
        self._touch('notes.txt', now + 100)

        self.assertEqual(find_data_file(self.tmp_dir), newest)

    def test_find_data_file_none(self):
        with self.assertRaises(FileNotFoundError):
            find_data_file(self.tmp_dir)

    def test_clean_old_files(self):
        now = time.time()
        self._touch('summary.json', now)
        self._touch('model_results.csv', now)
        keep = self._touch('concrete.csv', now)

        clean_old_files(self.tmp_dir, ['summary.json', 'model_results.csv'])

        self.assertEqual(os.listdir(self.tmp_dir), [os.path.basename(keep)])

    def test_save_frame_creates_directory(self):
        output_dir = os.path.join(self.tmp_dir, 'nested', 'out')
        df = pd.DataFrame({'a': [1, 2]})

        path = save_frame(df, output_dir, 'frame.csv')

        pd.testing.assert_frame_equal(pd.read_csv(path), df)

    def test_save_json(self):
        path = save_json({'best_model': 'x', 'correlation': 0.9}, self.tmp_dir, 'summary.json')

        with open(path) as f:
            self.assertEqual(json.load(f), {'best_model': 'x', 'correlation': 0.9})


if __name__ == '__main__':
    unittest.main()

import os
import shutil
import tempfile
import unittest

from boolean_retrieval.corpus import list_dir_sorted, load_csv, load_folder, load_stopwords


class TestCorpus(unittest.TestCase):
    def setUp(self):
        self.dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.dir)

    def _write(self, name, content, mode="w"):
        path = os.path.join(self.dir, name)
        with open(path, mode) as f:
            f.write(content)
        return path

    def test_natural_order(self):
        for name in ["10.txt", "2.txt", "1.txt"]:
            self._write(name, name)
        os.mkdir(os.path.join(self.dir, "sub"))
        names = [os.path.basename(p) for p in list_dir_sorted(self.dir)]
        self.assertEqual(names, ["1.txt", "2.txt", "10.txt"])

    def test_load_folder_filters_suffix(self):
        self._write("a.txt", "alpha")
        self._write("b.md", "beta")
        self._write("c.txt", b"gam\xffma", mode="wb")
        self.assertEqual(load_folder(self.dir), [("a.txt", "alpha"), ("c.txt", "gamma")])

    def test_missing_paths(self):
        with self.assertRaises(FileNotFoundError):
            load_folder(os.path.join(self.dir, "nope"))
        with self.assertRaises(FileNotFoundError):
            load_csv(os.path.join(self.dir, "nope.csv"))

    def test_load_csv(self):
        path = self._write("movies.csv", "title,plot\nAlien,space horror\nHeat,\n")
        self.assertEqual(load_csv(path), [("Alien", "space horror"), ("Heat", "")])
        self.assertEqual(load_csv(path, text_column="title", title_column="missing"),
                         [("0", "Alien"), ("1", "Heat")])
        with self.assertRaises(ValueError):
            load_csv(path, text_column="body")

    def test_load_stopwords(self):
        path = self._write("stop.txt", "The\n\nand\n")
        self.assertEqual(load_stopwords(path), {"the", "and"})


if __name__ == "__main__":
    unittest.main()

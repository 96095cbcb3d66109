"""Settings validation."""

import unittest

from pydantic import ValidationError

from mediagate.core.config import Settings


class TestDatabaseUrl(unittest.TestCase):
    def test_supported_urls(self) -> None:
        for url in (
            "postgresql://u:p@db:5432/mediagate",
            "postgresql+psycopg2://u:p@db/mediagate",
            "sqlite://",
        ):
            self.assertEqual(Settings(DATABASE_URL=url).DATABASE_URL, url)

    def test_rejects_drivers_without_installed_dialect(self) -> None:
        for url in ("mysql+pymysql://u:p@db/mediagate", "mongodb://db/mediagate", ""):
            with self.assertRaises(ValidationError, msg=url):
                Settings(DATABASE_URL=url)


if __name__ == "__main__":
    unittest.main()

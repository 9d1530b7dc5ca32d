import unittest

from pynotes.validators import validate_email, validate_note_text, validate_password


class ValidatorsTest(unittest.TestCase):
    def test_email(self):
        self.assertIsNone(validate_email("jane.doe@example.com"))
        self.assertEqual(validate_email(""), "Email is required")
        self.assertEqual(validate_email(None), "Email is required")
        for bad in ("jane", "jane@", "@example.com", "jane@example"):
            with self.subTest(email=bad):
                self.assertEqual(
                    validate_email(bad), "Please enter a valid email address"
                )

    def test_password(self):
        self.assertIsNone(validate_password("secret"))
        self.assertEqual(validate_password(""), "Password is required")
        self.assertEqual(
            validate_password("12345"),
            "Password must be at least 6 characters long",
        )

    def test_note_text(self):
        self.assertIsNone(validate_note_text(" text "))
        self.assertEqual(validate_note_text(""), "Note text is required")
        self.assertEqual(validate_note_text(" \n\t "), "Note cannot be empty")


if __name__ == "__main__":
    unittest.main()

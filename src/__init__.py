"""
Initializes the 'src' directory as a Python package.

This allows the 'markdownocr' application package to be imported as
`src.markdownocr` by scripts in the project root, such as 'main.py', and by
the test suite.
"""

"""Static analysis of contract sources."""

from xdev.lint.pipeline import LintPipeline, all_files, first_file_only

__all__ = ["LintPipeline", "all_files", "first_file_only"]

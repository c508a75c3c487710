"""Daily question: per-couple prompt allocation and the two-answer unlock gate."""

"""CounselHub counseling portal backend."""

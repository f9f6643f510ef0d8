"""releaseflow CLI"""

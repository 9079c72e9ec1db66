"""HTTP client and command line tool for the fu file sharing service."""

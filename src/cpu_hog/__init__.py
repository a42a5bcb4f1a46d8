"""cpu-hog: report the command eating the most CPU, one line per period."""

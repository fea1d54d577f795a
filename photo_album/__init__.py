"""Shared code of the photo album Lambdas, packaged with each function's asset."""

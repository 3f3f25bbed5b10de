"""Diagnostic probes.

Each probe is a plain function returning a list of CheckResult. Probes only
read host state; a failure to read optional data becomes a result, and only
failure to read mandatory data raises ProbeError.
"""

"""End-to-end scenario tests for header fan-out.

Each scenario follows a response from the application, through the fan-out
layer, to the single-value header map that would otherwise lose values.
"""

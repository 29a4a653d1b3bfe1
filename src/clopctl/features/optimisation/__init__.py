"""Batch optimisation: submit work to the service and follow it to completion."""

"""Bearer token handling for the data room API."""

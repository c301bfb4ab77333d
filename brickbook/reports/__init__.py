"""Statement reports (HTML, PDF, Excel)."""

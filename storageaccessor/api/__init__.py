"""HTTP surface of the admission webhook."""

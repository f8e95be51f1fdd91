"""HTTP surface for driving a Coup table from a renderer."""

"""dotnet-graph-mcp - .NET project graph extraction and validation."""

__version__ = "0.1.0"

#!/usr/bin/env python3
"""Development server runner for Burn Rate."""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "burn_rate.server.main:app",
        host="0.0.0.0",
        port=9000,
        reload=True,
        log_level="info",
    )

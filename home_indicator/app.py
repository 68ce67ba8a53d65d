# app.py
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse

from home_indicator.config import HOST, LOG_FORMAT, LOG_LEVEL, PORT
from home_indicator.indicator import HomeExtension, HomeIndicator

logger = logging.getLogger("home_indicator.app")

extension = HomeExtension()


def _active_indicator() -> HomeIndicator:
    indicator = extension.indicator
    if indicator is None:
        raise HTTPException(status_code=503, detail="indicator is not active")
    return indicator


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # start the refresh timer on the server's event loop
    extension.activate()
    try:
        yield
    finally:
        extension.deactivate()


app = FastAPI(title="Home Routes", lifespan=lifespan)


@app.get("/api/routes")
async def get_routes():
    return _active_indicator().snapshot()


@app.post("/api/refresh")
async def refresh_routes():
    _active_indicator()
    await extension.refresh()
    return _active_indicator().snapshot()


@app.get("/", response_class=HTMLResponse)
async def home():
    html = """
    <!doctype html><html><head><meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Routes home</title>
    <style>
      body{font-family:system-ui,Segoe UI,Roboto,Inter,Arial;margin:2rem}
      .row{padding:.5rem 0;border-bottom:1px solid #eee}
      .label{font-size:1.5rem;font-weight:700}
      .muted{color:#555}
      .err{color:#b00020}
    </style></head><body>
      <h1>Routes home</h1>
      <div id="label" class="label"></div>
      <div id="status" class="muted"></div>
      <div id="list"></div>
      <button onclick="refreshNow()">Refresh now</button>
      <script>
        function render(j){
          const l = document.getElementById('label');
          l.textContent = j.label; l.className = j.error ? "label err" : "label";
          const s = document.getElementById('status');
          s.textContent = j.updated_at ? "Updated: "+new Date(j.updated_at).toLocaleString() : "";
          const list = document.getElementById('list'); list.innerHTML="";
          j.routes.forEach(x=>{
            const d = document.createElement('div'); d.className="row";
            d.textContent = x;
            list.appendChild(d);
          });
        }
        async function load(){
          const r = await fetch('/api/routes');
          if(!r.ok){ document.getElementById('status').textContent = "Indicator not active"; return; }
          render(await r.json());
        }
        async function refreshNow(){
          const r = await fetch('/api/refresh', {method: 'POST'});
          if(r.ok){ render(await r.json()); }
        }
        load(); setInterval(load, 30000);
      </script>
    </body></html>
    """
    return HTMLResponse(html)


def main():
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    logger.info("serving routes on http://%s:%s", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()

"""Full-page layout for the HTTP interface.

The page is rendered server-side from the current `GenerationState`. A small script
submits the form as JSON to `/api/generate` and, while that request is pending,
refreshes the `#main` container from `/view` so the loading indicator can follow the
stage label.
"""

from pixel_genie.core.state import GenerationState
from pixel_genie.ui.components import main_panel
from pixel_genie.ui.icons import github_icon, sparkles_icon


TITLE = "Pixel Art Genie"
TAGLINE = "Let AI transform your ideas into stunning pixel art."
FOOTER_TEXT = "Powered by Google Gemini &amp; Imagen API."
REPOSITORY_URL = "https://github.com/google/project-idx"
POLL_INTERVAL_MS = 500

STYLES = """
body { margin: 0; min-height: 100vh; display: flex; flex-direction: column;
       align-items: center; justify-content: center; padding: 1rem;
       background: #111827; color: #e5e7eb; font-family: system-ui, sans-serif; }
.card { width: 100%; max-width: 42rem; background: #1f2937; border-radius: .75rem;
        padding: 2.5rem; box-shadow: 0 25px 50px -12px rgba(0,0,0,.5); }
header { text-align: center; }
h1 { display: flex; align-items: center; justify-content: center; font-size: 2.5rem;
     color: #ec4899; margin: 0; }
.icon { width: 2.5rem; height: 2.5rem; margin-right: .75rem; }
footer .icon { width: 1.25rem; height: 1.25rem; margin-right: .5rem; }
.tagline { color: #9ca3af; font-size: 1.1rem; }
#main > * { margin-top: 2rem; }
.prompt-form { display: flex; flex-direction: column; gap: .75rem; }
textarea { background: #374151; color: inherit; border: 1px solid #4b5563;
           border-radius: .5rem; padding: .75rem; font-size: 1rem; resize: vertical; }
button { background: #8b5cf6; color: white; border: 0; border-radius: .5rem;
         padding: .75rem; font-size: 1rem; cursor: pointer; }
button[disabled], textarea[disabled] { opacity: .5; cursor: not-allowed; }
.loading { text-align: center; }
.spinner { margin: 0 auto; width: 3rem; height: 3rem; border-radius: 50%;
           border: 4px solid #4b5563; border-top-color: #a78bfa;
           animation: spin 1s linear infinite; }
@keyframes spin { to { transform: rotate(360deg); } }
.stage { color: #c4b5fd; }
.error { background: rgba(127,29,29,.5); border: 1px solid #b91c1c; color: #fecaca;
         padding: 1rem; border-radius: .5rem; }
.refined { background: rgba(55,65,81,.5); border: 1px solid #4b5563; padding: 1rem;
           border-radius: .5rem; }
.refined h3 { color: #c4b5fd; margin-top: 0; }
.refined p { font-family: monospace; color: #9ca3af; line-height: 1.6; }
.viewer { display: flex; justify-content: center; align-items: center;
          min-height: 16rem; border: 2px dashed #4b5563; border-radius: .5rem; }
.viewer img { max-width: 100%; image-rendering: pixelated; border-radius: .5rem; }
.placeholder p { color: #6b7280; }
.sr-only { position: absolute; width: 1px; height: 1px; overflow: hidden;
           clip: rect(0,0,0,0); }
footer { margin-top: 3rem; text-align: center; color: #6b7280; font-size: .875rem; }
footer a { display: inline-flex; align-items: center; color: #9ca3af;
           text-decoration: none; margin-top: .5rem; }
footer a:hover { color: #8b5cf6; }
"""

SCRIPT = """
(function () {
  var main = document.getElementById("main");

  function refresh() {
    return fetch("/view").then(function (r) { return r.text(); })
      .then(function (html) { main.innerHTML = html; });
  }

  main.addEventListener("submit", function (event) {
    event.preventDefault();
    var prompt = document.getElementById("prompt").value;
    document.getElementById("submit").disabled = true;
    var poller = setInterval(refresh, %(poll)d);
    fetch("/api/generate", {
      method: "POST",
      headers: {"Content-Type": "application/json"},
      body: JSON.stringify({prompt: prompt})
    }).finally(function () {
      clearInterval(poller);
      refresh();
    });
  });
})();
""" % {"poll": POLL_INTERVAL_MS}


def render_page(state: GenerationState) -> str:
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f"<title>{TITLE}</title><style>{STYLES}</style></head><body>"
        '<div class="card">'
        "<header>"
        f"<h1>{sparkles_icon()}{TITLE}</h1>"
        f'<p class="tagline">{TAGLINE}</p>'
        "</header>"
        f'<div id="main">{main_panel(state)}</div>'
        "</div>"
        "<footer>"
        f"<p>{FOOTER_TEXT}</p>"
        f'<a href="{REPOSITORY_URL}" target="_blank" rel="noopener noreferrer">'
        f"{github_icon()}View on GitHub</a>"
        "</footer>"
        f"<script>{SCRIPT}</script>"
        "</body></html>"
    )

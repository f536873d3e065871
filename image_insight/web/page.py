"""Single-page upload UI served at `/`. Presentation only; all state lives server-side."""

INDEX_HTML = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{title}</title>
</head>
<body>
  <h1>{title}</h1>
  <input id="image" type="file" accept="image/*">
  <button id="analyze" disabled>Analyze image</button>
  <div id="result"><p>Analysis results will appear here.</p></div>
  <script>
    const input = document.getElementById("image");
    const button = document.getElementById("analyze");
    const result = document.getElementById("result");

    function render(view) {{
      button.disabled = view.busy || !view.has_file;
      if (view.busy) {{
        result.textContent = "Waiting for the model...";
      }} else if (view.error) {{
        result.textContent = "Error: " + view.error;
      }} else if (view.state === "succeeded") {{
        result.style.whiteSpace = "pre-wrap";
        result.textContent = view.text;
      }} else {{
        result.textContent = "Analysis results will appear here.";
      }}
    }}

    async function call(method, url, body) {{
      const response = await fetch(url, {{ method, body, credentials: "same-origin" }});
      render(await response.json());
    }}

    input.addEventListener("change", () => {{
      const form = new FormData();
      form.append("image", input.files[0]);
      call("POST", "/api/v1/session/image", form);
    }});
    button.addEventListener("click", () => {{
      button.disabled = true;
      render({{ busy: true }});
      call("POST", "/api/v1/session/analyze");
    }});
    call("GET", "/api/v1/session");
  </script>
</body>
</html>
"""

"""Server-rendered chat page with a self-contained chat widget.

HTML, CSS and JavaScript live in ``CHAT_PAGE_HTML`` so the page is served as a
single response. Message text is rendered with ``textContent`` only.
"""

from __future__ import annotations

import html
import json

from memchat.chat.surface import ERROR_PREFIX, SEND_FAILED_MESSAGE, WELCOME_MESSAGE

PAGE_TITLE = "Supermemory Chat Test"
PAGE_DESCRIPTION = "Test Supermemory with a simple chatbot"

CHAT_PAGE_HTML = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{TITLE}}</title>
<meta name="description" content="{{DESCRIPTION}}">
<style>
* { box-sizing: border-box; }
body {
  margin: 0;
  min-height: 100vh;
  font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
  background: linear-gradient(135deg, #020617, #0f172a, #020617);
  color: #fff;
}
.container { max-width: 56rem; margin: 0 auto; padding: 2rem 1rem; }
.header { text-align: center; margin-bottom: 2rem; }
.header h1 {
  font-size: 2.25rem;
  margin: 0 0 .5rem;
  background: linear-gradient(90deg, #60a5fa, #67e8f9, #60a5fa);
  -webkit-background-clip: text;
  background-clip: text;
  color: transparent;
}
.header p { color: rgba(255,255,255,.6); margin: 0; }
.header .user-id { font-size: .75rem; color: rgba(255,255,255,.4); margin-top: .25rem; }
.chat {
  background: rgba(15,23,42,.8);
  border: 1px solid rgba(255,255,255,.1);
  border-radius: 1rem;
  overflow: hidden;
}
.messages { height: 24rem; overflow-y: auto; padding: 1.5rem; }
.row { display: flex; margin-bottom: 1rem; }
.row.user { justify-content: flex-end; }
.row.assistant { justify-content: flex-start; }
.bubble { max-width: 28rem; padding: .5rem 1rem; border-radius: 1rem; }
.row.user .bubble { background: #2563eb; margin-left: 1rem; }
.row.assistant .bubble { background: #1e293b; color: rgba(255,255,255,.9); margin-right: 1rem; }
.content { font-size: .875rem; white-space: pre-wrap; }
.memory-flag { font-size: .75rem; color: #93c5fd; margin-top: .25rem; }
.time { font-size: .75rem; opacity: .5; margin-top: .25rem; }
form { display: flex; gap: .5rem; padding: 1.5rem; border-top: 1px solid rgba(255,255,255,.1); }
input[type=text] {
  flex: 1;
  background: rgba(2,6,23,.8);
  border: 1px solid rgba(255,255,255,.1);
  border-radius: .75rem;
  padding: .75rem 1rem;
  color: #fff;
}
input[type=text]:focus { outline: none; border-color: rgba(59,130,246,.5); }
button {
  background: #2563eb;
  color: #fff;
  border: 0;
  border-radius: .75rem;
  padding: .75rem 1.5rem;
  font-weight: 500;
  cursor: pointer;
}
button:hover { background: #1d4ed8; }
button:disabled { background: #334155; cursor: not-allowed; }
</style>
</head>
<body>
<div class="container">
  <div class="header">
    <h1>Supermemory Chatbot Test</h1>
    <p>Test memory storage and retrieval with this AI chatbot</p>
    <p class="user-id">User ID: {{USER_ID}}</p>
  </div>
  <div class="chat">
    <div class="messages" id="messages"></div>
    <form id="chat-form">
      <input type="text" id="chat-input" placeholder="Type your message..." autocomplete="off">
      <button type="submit" id="chat-send" disabled>Send</button>
    </form>
  </div>
</div>
<script>
(function () {
  var CONFIG = {{CONFIG}};
  var messages = [];
  var isLoading = false;

  var list = document.getElementById("messages");
  var form = document.getElementById("chat-form");
  var input = document.getElementById("chat-input");
  var send = document.getElementById("chat-send");

  function newId() {
    if (window.crypto && crypto.randomUUID) return crypto.randomUUID().replace(/-/g, "");
    return String(Date.now()) + Math.random().toString(16).slice(2);
  }

  function localMessage(role, content) {
    return { id: newId(), role: role, content: content, timestamp: new Date() };
  }

  function bubble(message) {
    var row = document.createElement("div");
    row.className = "row " + message.role;
    var box = document.createElement("div");
    box.className = "bubble";
    var content = document.createElement("div");
    content.className = "content";
    content.textContent = message.content;
    box.appendChild(content);
    if (message.memoryCreated) {
      var flag = document.createElement("div");
      flag.className = "memory-flag";
      flag.textContent = "💾 Memory created";
      box.appendChild(flag);
    }
    var time = document.createElement("div");
    time.className = "time";
    time.textContent = new Date(message.timestamp).toLocaleTimeString();
    box.appendChild(time);
    row.appendChild(box);
    return row;
  }

  function render() {
    list.textContent = "";
    messages.forEach(function (m) { list.appendChild(bubble(m)); });
    if (isLoading) {
      list.appendChild(bubble({ role: "assistant", content: "Thinking...", timestamp: new Date() }));
      list.lastChild.querySelector(".time").remove();
    }
    input.disabled = isLoading;
    send.disabled = isLoading || !input.value.trim();
    list.scrollTop = list.scrollHeight;
  }

  function append(message) {
    messages = messages.concat([message]);
    render();
  }

  input.addEventListener("input", render);

  form.addEventListener("submit", function (e) {
    e.preventDefault();
    var text = input.value.trim();
    if (!text || isLoading) return;

    append(localMessage("user", text));
    input.value = "";
    isLoading = true;
    render();

    fetch(CONFIG.endpoint, {
      method: "POST",
      headers: { "Content-Type": "application/json" },
      body: JSON.stringify({ userId: CONFIG.userId, message: text })
    })
      .then(function (response) { return response.json(); })
      .then(function (result) {
        if (result.success) {
          var reply = Object.assign({}, result.assistantMessage, {
            timestamp: new Date(result.assistantMessage.timestamp)
          });
          append(reply);
        } else {
          append(localMessage("assistant", CONFIG.errorPrefix + result.error));
        }
      })
      .catch(function () {
        append(localMessage("assistant", CONFIG.sendFailed));
      })
      .then(function () {
        isLoading = false;
        render();
      });
  });

  messages = [localMessage("assistant", CONFIG.welcome)];
  render();
})();
</script>
</body>
</html>
"""


def _script_json(value: object) -> str:
    """JSON that is safe to inline inside a <script> element."""
    return json.dumps(value).replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def render_chat_page(user_id: str, endpoint: str = "/api/chat") -> str:
    """Render the chat page for *user_id*."""
    config = {
        "userId": user_id,
        "endpoint": endpoint,
        "welcome": WELCOME_MESSAGE,
        "errorPrefix": ERROR_PREFIX,
        "sendFailed": SEND_FAILED_MESSAGE,
    }
    return (
        CHAT_PAGE_HTML.replace("{{TITLE}}", html.escape(PAGE_TITLE))
        .replace("{{DESCRIPTION}}", html.escape(PAGE_DESCRIPTION))
        .replace("{{USER_ID}}", html.escape(user_id))
        .replace("{{CONFIG}}", _script_json(config))
    )

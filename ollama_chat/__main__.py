from ollama_chat.main import run

run()

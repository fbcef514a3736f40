from kivy.app import App
from kivy.uix.screenmanager import Screen


class CounterScreen(Screen):
    """Shows the server's counter and lets the user overwrite it."""

    def submit(self):
        field = self.ids.value_input
        App.get_running_app().on_set_counter(field.text)
        field.text = ""

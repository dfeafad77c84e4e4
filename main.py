import ctypes
import logging
import os
import tkinter as tk

from PIL import Image, ImageTk
import sv_ttk

from gui.gui_bancada import BancadaGUI


def load_icon(root):
    """Aplica o ícone da janela, se icons/icon.ico existir."""
    icon_path = os.path.join(os.path.dirname(__file__), "icons", "icon.ico")
    if not os.path.exists(icon_path):
        return None
    try:
        image = Image.open(icon_path)
        icon_img = ImageTk.PhotoImage(image.resize((32, 32), Image.Resampling.LANCZOS))
        root.iconphoto(False, icon_img)
        return icon_img
    except (OSError, tk.TclError) as e:
        logging.getLogger(__name__).warning("Não foi possível carregar o ícone: %s", e)
        return None


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    root = tk.Tk()

    try:
        ctypes.windll.shcore.SetProcessDpiAwareness(1)
    except (AttributeError, OSError):
        pass

    sv_ttk.set_theme("light")
    root.icon_image = load_icon(root)

    app = BancadaGUI(root)
    root.mainloop()


if __name__ == "__main__":
    main()

import tkinter as tk
from tkinter import filedialog, messagebox, ttk
import tkinter.font as tkfont
import logging

from tkinterdnd2 import DND_FILES, TkinterDnD
from PIL import ImageTk

import config
from assets import load_all_animation_frames, pick_font_family, register_font, resolve_assets_dir
from file_opener import open_entry
from logger import log_user_action, setup_logger
from pdf_unlocker import qpdf_setup_message
from session import CrackLeafSession

logger = logging.getLogger("CrackLeaf")


class Tooltip:
    def __init__(self, widget):
        self.widget = widget
        self.tipwindow = None

    def showtip(self, text):
        if self.tipwindow or not text:
            return
        x = self.widget.winfo_rootx() + 25
        y = self.widget.winfo_rooty() + self.widget.winfo_height() + 4
        self.tipwindow = tw = tk.Toplevel(self.widget)
        tw.wm_overrideredirect(True)
        tw.wm_geometry(f"+{x}+{y}")
        label = tk.Label(tw, text=text, justify=tk.LEFT,
                         background=config.TOOLTIP_BG, relief=tk.SOLID, borderwidth=1,
                         font=("tahoma", "8", "normal"))
        label.pack(ipadx=1)

    def hidetip(self):
        tw = self.tipwindow
        self.tipwindow = None
        if tw:
            tw.destroy()


class CrackLeafApp:
    def __init__(self, root, session=None):
        self.root = root
        self.root.title(config.APP_NAME)
        self.root.configure(bg=config.BG_COLOR)

        # 初始窗口尺寸和位置设置，宽度固定
        screen_width = self.root.winfo_screenwidth()
        screen_height = self.root.winfo_screenheight()
        x = int((screen_width - config.WINDOW_WIDTH) / 2)
        y = int((screen_height - config.WINDOW_HEIGHT_BASE) / 2)
        self.root.geometry(f"{config.WINDOW_WIDTH}x{config.WINDOW_HEIGHT_BASE}+{x}+{y}")
        self.root.resizable(False, False)
        self.last_window_height = config.WINDOW_HEIGHT_BASE

        self.session = session or CrackLeafSession()

        assets_dir = resolve_assets_dir()
        logger.info(f"[App] 资源目录: {assets_dir}")
        register_font(assets_dir)
        family = pick_font_family(tkfont.families(self.root))
        self.custom_font = tkfont.Font(root=self.root, family=family, size=config.FONT_SIZE)
        self.small_font = tkfont.Font(root=self.root, family=family, size=config.FONT_SIZE - 4)

        # Logo 尺寸为窗口宽度的一半
        self.image_display_size = max(60, min(int(config.WINDOW_WIDTH * 0.5), 240))
        self.animation_frames = {}
        self.load_frame_images(assets_dir)

        self.style = ttk.Style()
        self.style.theme_use('default')
        self.style.configure('Open.TButton', font=self.small_font, background='#f0f0f0',
                             foreground=config.FG_COLOR, padding=0, width=2)
        self.style.map('Open.TButton', background=[('active', '#d9d9d9')])

        self.mascot_hovered = False
        self.drag_overlay = None
        self.shown_frame = None
        self.shown_rows = None

        self.create_widgets()
        self.setup_drag_and_drop()

        self.redraw()
        self.root.after(config.UI_POLL_MS, self.on_frame)
        self.root.after_idle(self.prompt_for_tool)

    def load_frame_images(self, assets_dir):
        """预加载所有动画帧并缩放到显示尺寸"""
        size = (self.image_display_size, self.image_display_size)
        for key, images in load_all_animation_frames(assets_dir).items():
            self.animation_frames[key] = [ImageTk.PhotoImage(img.resize(size), master=self.root)
                                          for img in images]

    def create_widgets(self):
        self.main_frame = tk.Frame(self.root, bg=config.BG_COLOR)
        self.main_frame.pack(expand=True, fill=tk.BOTH, padx=20, pady=10)

        self.top_frame = tk.Frame(self.main_frame, bg=config.BG_COLOR)
        self.top_frame.pack(side=tk.TOP)

        self.logo_label = tk.Label(self.top_frame, bg=config.BG_COLOR, cursor="hand2", borderwidth=0)
        self.logo_label.pack(pady=(10, 5))
        self.logo_label.bind("<Button-1>", lambda e: self.on_mascot_click())
        self.logo_label.bind("<Enter>", lambda e: self.set_mascot_hovered(True))
        self.logo_label.bind("<Leave>", lambda e: self.set_mascot_hovered(False))

        self.label_hint = tk.Label(self.top_frame, text="", font=self.custom_font,
                                   bg=config.BG_COLOR, fg=config.FG_COLOR)
        self.label_hint.pack(pady=(0, 5))

        # 底部结果文字
        self.result_label = tk.Label(self.main_frame, text="", font=self.custom_font,
                                     bg=config.BG_COLOR, fg=config.FG_COLOR)
        self.result_label.pack(side=tk.BOTTOM, pady=(5, 5))

        self.tool_label = tk.Label(self.main_frame, text="", font=self.small_font, wraplength=config.WINDOW_WIDTH - 40,
                                   bg=config.BG_COLOR, fg="gray")
        self.tool_label.pack(side=tk.BOTTOM)

        # 文件列表 (多于一个文件时显示)
        self.file_frame = tk.Frame(self.main_frame, bg=config.BG_COLOR)
        self.file_canvas = tk.Canvas(self.file_frame, height=1, bg=config.BG_COLOR, highlightthickness=0, borderwidth=0)
        self.scrollbar = tk.Scrollbar(self.file_frame, command=self.file_canvas.yview)
        self.file_canvas.configure(yscrollcommand=self.scrollbar.set)
        self.scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        self.file_canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

        self.rows_frame = tk.Frame(self.file_canvas, bg=config.BG_COLOR)
        self.rows_window = self.file_canvas.create_window((0, 0), window=self.rows_frame, anchor="nw")
        self.rows_frame.bind("<Configure>", lambda e: self.file_canvas.configure(
            scrollregion=self.file_canvas.bbox("all")))
        self.file_canvas.bind("<Configure>", lambda e: self.file_canvas.itemconfigure(
            self.rows_window, width=e.width))
        self.file_canvas.bind("<MouseWheel>", self.on_mousewheel)

        self.tooltip = None

    # --- 帧循环 ---
    def on_frame(self):
        mode = self.session.animation.mode
        self.session.set_mascot_hovered(self.mascot_hovered)
        if self.session.update() or self.session.animation.mode != mode:
            self.redraw()
        self.root.after(config.UI_POLL_MS, self.on_frame)

    def redraw(self):
        animation = self.session.animation
        frame_key = (animation.frame_set, animation.current_frame())
        if frame_key != self.shown_frame:
            frames = self.animation_frames.get(frame_key[0]) or self.animation_frames["logo"]
            self.logo_label.config(image=frames[min(frame_key[1], len(frames) - 1)])
            self.shown_frame = frame_key

        self.label_hint.config(text=self.session.hint_text)
        self.result_label.config(text=self.session.result_text)
        self.tool_label.config(text=self.session.tool_message or "")
        self.update_file_display()
        self.update_window_geometry()

    def update_window_geometry(self):
        height = self.session.window_height
        if height != self.last_window_height:
            self.root.geometry(f"{config.WINDOW_WIDTH}x{height}")
            self.last_window_height = height

    def update_file_display(self):
        entries = self.session.entries
        rows = [(f.path, f.icon, f.status, f.output_path) for f in entries]
        if rows == self.shown_rows:
            return
        self.shown_rows = rows
        self.hide_row_tooltip()

        for child in self.rows_frame.winfo_children():
            child.destroy()

        if len(entries) <= 1:
            self.file_frame.pack_forget()
            return

        self.file_frame.pack(side=tk.TOP, expand=True, fill=tk.BOTH)
        if len(entries) >= config.LIST_GROW_START:
            self.scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        else:
            self.scrollbar.pack_forget()

        max_pixel_width = config.WINDOW_WIDTH - 40 - 50
        fnt = self.custom_font
        for entry in entries:
            row = tk.Frame(self.rows_frame, bg=config.BG_COLOR)
            row.pack(fill=tk.X, pady=4)

            tk.Label(row, text=entry.icon, font=fnt, bg=config.BG_COLOR, fg=config.FG_COLOR).pack(side=tk.LEFT)

            # 按像素宽度截断文件名
            filename = entry.name
            display_name = filename
            while fnt.measure(display_name) > max_pixel_width and len(display_name) > 4:
                display_name = display_name[:-1]
            if display_name != filename:
                display_name = display_name[:-3] + "..."

            name_label = tk.Label(row, text=display_name, font=fnt, anchor="w",
                                  bg=config.BG_COLOR, fg=config.FG_COLOR)
            name_label.pack(side=tk.LEFT, fill=tk.X, expand=True)
            name_label.bind("<Double-Button-1>", lambda e, f=entry: self.on_open_entry(f))
            name_label.bind("<Enter>", lambda e, w=name_label, s=entry.status: self.show_row_tooltip(w, s))
            name_label.bind("<Leave>", lambda e: self.hide_row_tooltip())

            if entry.output_path:
                ttk.Button(row, text=config.TEXT_OPEN_BUTTON, style='Open.TButton',
                           command=lambda f=entry: self.on_open_entry(f)).pack(side=tk.RIGHT)

    def show_row_tooltip(self, widget, status):
        self.hide_row_tooltip()
        self.tooltip = Tooltip(widget)
        self.tooltip.showtip(status)

    def hide_row_tooltip(self):
        if self.tooltip:
            self.tooltip.hidetip()
            self.tooltip = None

    def on_mousewheel(self, event):
        self.file_canvas.yview_scroll(int(-event.delta / 120) or (-1 if event.delta > 0 else 1), "units")

    # --- 用户操作 ---
    def set_mascot_hovered(self, hovered):
        self.mascot_hovered = hovered
        self.session.set_mascot_hovered(hovered)
        self.redraw()

    def on_mascot_click(self):
        if not self.session.entries:
            self.import_file()
            return
        self.session.request_unlock()
        self.redraw()

    def import_file(self):
        filepaths = filedialog.askopenfilenames(parent=self.root, filetypes=[("PDF files", "*.pdf")])
        if filepaths:
            self.handle_files(filepaths)

    def handle_files(self, filepaths):
        added = self.session.add_files(filepaths)
        logger.debug(f"[App] 新增 {added} 个文件")
        self.redraw()

    def on_open_entry(self, entry):
        log_user_action("打开文件", entry.output_path or entry.path, context="App")
        open_entry(entry)

    def prompt_for_tool(self):
        if self.session.take_tool_prompt():
            messagebox.showerror(config.QPDF_DIALOG_TITLE, qpdf_setup_message(), parent=self.root)

    # --- 拖放 ---
    def setup_drag_and_drop(self):
        self.root.drop_target_register(DND_FILES)
        self.root.dnd_bind('<<DropEnter>>', self.drag_enter_event)
        self.root.dnd_bind('<<DropLeave>>', self.drag_leave_event)
        self.root.dnd_bind('<<Drop>>', self.drop_event)

    def drag_enter_event(self, event):
        # 覆盖层是根窗口的子控件，拖放目标仍然是根窗口
        if self.drag_overlay is None:
            self.drag_overlay = tk.Label(self.root, text=config.TEXT_DROP_OVERLAY, font=self.custom_font,
                                         fg="white", bg="gray")
            self.drag_overlay.place(relx=0, rely=0, relwidth=1, relheight=1)
        return event.action

    def drag_leave_event(self, event):
        self.close_drag_overlay()
        return event.action

    def close_drag_overlay(self):
        if self.drag_overlay:
            self.drag_overlay.destroy()
            self.drag_overlay = None

    def drop_event(self, event):
        self.close_drag_overlay()
        try:
            files = self.root.tk.splitlist(event.data)
        except tk.TclError as e:
            logger.warning(f"[App] 无法解析拖入的数据: {e}")
            files = []
        self.handle_files(files)
        return event.action


def main():
    setup_logger()
    # 使用 TkinterDnD.Tk() 替代 tk.Tk()，以支持拖拽功能
    root = TkinterDnD.Tk()
    CrackLeafApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()

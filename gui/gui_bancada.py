import os
import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from typing import Dict, List, Optional

from PIL import Image, ImageTk

from core.automato import ResultadoPasso
from core.condicoes import TipoMaquina
from core.erros import ErroInferencia
from core.exportar import export_jflap
from core.grafo import Grafo
from core.simulador import CasoTeste, Simulador
from core.validador import Alfabetos, OpcoesValidacao

ANIM_MS = 400

RESPOSTAS = {"aceita": True, "a": True, "sim": True, "1": True,
             "rejeita": False, "r": False, "nao": False, "não": False, "0": False}


def parse_alphabet(texto: str) -> Optional[frozenset]:
    """'' -> None (inferir); 'a, b' ou 'a b' -> {a, b}; 'ab' -> {a, b}."""
    texto = texto.strip()
    if not texto:
        return None
    if "," in texto or " " in texto:
        return frozenset(t for t in texto.replace(",", " ").split())
    return frozenset(texto)


def parse_test_case(linha: str) -> CasoTeste:
    """Formato: 'entrada ; aceita' (entrada vazia é permitida)."""
    entrada, sep, esperado = linha.rpartition(";")
    if not sep:
        raise ValueError(f"Caso sem ';': '{linha}'")
    chave = esperado.strip().lower()
    if chave not in RESPOSTAS:
        raise ValueError(f"Resultado esperado inválido: '{esperado.strip()}'")
    return CasoTeste(entrada.strip(), RESPOSTAS[chave])


class Tooltip:
    """ Dica de ferramenta simples para um widget. """
    def __init__(self, widget, text):
        self.widget = widget
        self.text = text
        self.window = None
        widget.bind("<Enter>", self.show, add='+')
        widget.bind("<Leave>", self.hide, add='+')

    def show(self, event=None):
        if not self.widget.winfo_exists(): return
        self.window = tw = tk.Toplevel(self.widget)
        tw.wm_overrideredirect(True)
        tw.wm_geometry(f"+{self.widget.winfo_pointerx() + 15}+{self.widget.winfo_pointery() + 10}")
        tk.Label(tw, text=self.text, background="#ffffe0", relief='solid', borderwidth=1,
                 font=("tahoma", "8", "normal")).pack(ipadx=1)

    def hide(self, event=None):
        tw, self.window = self.window, None
        if tw:
            try: tw.destroy()
            except tk.TclError: pass


class BancadaGUI:
    """ Bancada de testes: carrega um grafo, compila como máquina e simula entradas. """
    def __init__(self, root):
        self.root = root
        root.title("Bancada de Autômatos")
        root.geometry("1100x750")

        style = ttk.Style()
        style.configure("TButton", padding=(15, 12))
        style.configure("Accent.TButton", padding=(15, 12))
        style.configure("Toolbutton", padding=(10, 8), relief="flat")

        # Modelo
        self.grafo = Grafo()
        self.simulador = Simulador()
        self.current_filepath = None
        self.icons: Dict[str, ImageTk.PhotoImage] = {}

        # Simulação
        self.sim_playing = False
        self.result_indicator: Optional[ResultadoPasso] = None

        self.tipo_var = tk.StringVar(value=TipoMaquina.AUTO.value)
        self.alpha_var = tk.StringVar()
        self.stack_var = tk.StringVar()
        self.tape_var = tk.StringVar()
        self.require_all_var = tk.BooleanVar(value=False)

        self._build_toolbar()
        self._build_body()
        self._build_bottom_bar()
        self._build_statusbar()

    def _build_toolbar(self):
        toolbar = tk.Frame(self.root)
        toolbar.pack(side=tk.TOP, fill=tk.X, padx=10, pady=(5, 10))

        self._create_toolbar_button(toolbar, "arquivo", "Abrir grafo (.json)", self.cmd_open)
        self._create_toolbar_button(toolbar, "exportar", "Exportar para JFLAP (.jff)", self.cmd_export_jflap)
        ttk.Separator(toolbar, orient='vertical').pack(side=tk.LEFT, padx=8, fill='y')

        ttk.Label(toolbar, text="Tipo:").pack(side=tk.LEFT)
        ttk.Combobox(toolbar, textvariable=self.tipo_var, state="readonly", width=16,
                     values=[t.value for t in TipoMaquina]).pack(side=tk.LEFT, padx=5)

        for rotulo, var in (("Alfabeto:", self.alpha_var), ("Pilha:", self.stack_var), ("Fita:", self.tape_var)):
            ttk.Label(toolbar, text=rotulo).pack(side=tk.LEFT, padx=(8, 0))
            entry = ttk.Entry(toolbar, textvariable=var, width=10)
            entry.pack(side=tk.LEFT, padx=2)
            Tooltip(entry, "Vazio = inferir a partir das transições")

        ttk.Checkbutton(toolbar, text="Exigir todas as transições",
                        variable=self.require_all_var).pack(side=tk.LEFT, padx=8)
        ttk.Button(toolbar, text="Compilar", command=self.cmd_compile, style="Accent.TButton").pack(side=tk.LEFT, padx=2)

    def _create_toolbar_button(self, parent, icon_name, tooltip_text, command):
        """ Botão com ícone quando houver imagem em icons/, senão com texto. """
        icon_path = os.path.join("icons", f"{icon_name}.png")
        try:
            img = Image.open(icon_path).convert("RGBA")
            img = img.resize((40, 40), Image.Resampling.LANCZOS)
            self.icons[icon_name] = ImageTk.PhotoImage(img)
            button = ttk.Button(parent, image=self.icons[icon_name], command=command, style="Toolbutton")
        except (OSError, tk.TclError):
            button = ttk.Button(parent, text=tooltip_text, command=command)
        button.pack(side=tk.LEFT, padx=2)
        Tooltip(button, tooltip_text)

    def _build_body(self):
        body = tk.Frame(self.root)
        body.pack(fill=tk.BOTH, expand=True, padx=10)

        left = ttk.LabelFrame(body, text="Máquina")
        left.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(0, 5))
        self.machine_text = tk.Text(left, wrap="none", font=("Courier", 10), state="disabled")
        self.machine_text.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

        right = ttk.LabelFrame(body, text="Casos de teste ('entrada ; aceita|rejeita')")
        right.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(5, 0))
        self.cases_text = tk.Text(right, height=8, font=("Courier", 10))
        self.cases_text.pack(fill=tk.X, padx=5, pady=5)
        ttk.Button(right, text="Executar Testes", command=self.cmd_run_tests).pack(pady=2)

        self.results = ttk.Treeview(right, columns=("entrada", "esperado", "obtido", "extra"), show="headings")
        for col, titulo in (("entrada", "Entrada"), ("esperado", "Esperado"), ("obtido", "Obtido"), ("extra", "Fita/Pilha")):
            self.results.heading(col, text=titulo)
        self.results.tag_configure("ok", background="#d4edda")
        self.results.tag_configure("falha", background="#f8d7da")
        self.results.pack(fill=tk.BOTH, expand=True, padx=5, pady=5)

    def _build_bottom_bar(self):
        bottom = tk.Frame(self.root)
        bottom.pack(side=tk.BOTTOM, fill=tk.X, padx=10, pady=10)

        ttk.Label(bottom, text="Entrada:", font=("Helvetica", 10)).pack(side=tk.LEFT)
        self.input_entry = ttk.Entry(bottom, width=30, font=("Helvetica", 11))
        self.input_entry.pack(side=tk.LEFT, padx=5, ipady=5)

        ttk.Button(bottom, text="Simular", command=self.cmd_start_simulation, style="Accent.TButton").pack(side=tk.LEFT, padx=2)
        ttk.Button(bottom, text="Passo", command=self.cmd_step).pack(side=tk.LEFT, padx=2)
        ttk.Button(bottom, text="Play/Pausar", command=self.cmd_play_pause).pack(side=tk.LEFT, padx=2)
        ttk.Button(bottom, text="Reiniciar", command=self.cmd_reset_sim).pack(side=tk.LEFT, padx=2)
        ttk.Button(bottom, text="Encerrar", command=self.cmd_end_sim).pack(side=tk.LEFT, padx=2)

        self.timelines_list = tk.Listbox(bottom, height=4, font=("Courier", 10))
        self.timelines_list.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=10)

    def _build_statusbar(self):
        self.status = tk.Label(self.root, text="Pronto", anchor="w", relief=tk.SUNKEN, padx=5)
        self.status.pack(side=tk.BOTTOM, fill=tk.X)

    def _alfabetos(self) -> Alfabetos:
        return Alfabetos(parse_alphabet(self.alpha_var.get()),
                         parse_alphabet(self.stack_var.get()),
                         parse_alphabet(self.tape_var.get()))

    def _opcoes(self) -> OpcoesValidacao:
        return OpcoesValidacao(require_all_transitions=self.require_all_var.get())

    def cmd_open(self):
        path = filedialog.askopenfilename(defaultextension=".json", filetypes=[("Grafos", "*.json"), ("All", "*.*")])
        if not path: return
        try:
            with open(path, "r", encoding="utf-8") as f:
                self.grafo = Grafo.from_json(f.read())
        except (OSError, ValueError, KeyError) as e:
            messagebox.showerror("Erro Abrir", f"Falha:\n{e}", parent=self.root)
            return
        self.current_filepath = path
        self.root.title(f"Bancada de Autômatos - {os.path.basename(path)}")
        self.simulador.end_simulation()
        self._show_machine()
        self.status.config(text=f"Arquivo '{os.path.basename(path)}' carregado: "
                                f"{len(self.grafo.nodes)} estados, {len(self.grafo.transitions)} transições.")

    def cmd_compile(self):
        tipo = TipoMaquina.from_str(self.tipo_var.get())
        try:
            maquina = self.simulador.compile(self.grafo, tipo, self._alfabetos(), self._opcoes())
        except ErroInferencia as e:
            detalhes = "\n".join(f"{t.value}: {motivo}" for t, motivo in e.tentativas.items())
            messagebox.showerror("Compilar", f"{e}\n\n{detalhes}", parent=self.root)
            return
        except ValueError as e:
            messagebox.showerror("Compilar", str(e), parent=self.root)
            return
        self.result_indicator = None
        self._show_machine()
        self.status.config(text=f"Compilado como {maquina.tipo.value}.")

    def cmd_export_jflap(self):
        path = filedialog.asksaveasfilename(defaultextension=".jff", filetypes=[("JFLAP", "*.jff")])
        if not path: return
        try:
            xml = export_jflap(self.grafo, TipoMaquina.from_str(self.tipo_var.get()), self._alfabetos(), self._opcoes())
            with open(path, "w", encoding="utf-8") as f: f.write(xml)
            messagebox.showinfo("Exportar", f"JFLAP exportado para {path}", parent=self.root)
        except (OSError, ValueError) as e:
            messagebox.showerror("Erro JFLAP", f"Falha:\n{e}", parent=self.root)

    def cmd_start_simulation(self):
        input_str = self.input_entry.get()
        try:
            self.simulador.simulate(input_str)
        except (RuntimeError, ValueError) as e:
            messagebox.showwarning("Simulação", str(e), parent=self.root)
            return
        self.sim_playing = False; self.result_indicator = None
        self._show_timelines()
        self.status.config(text=f"Simulação iniciada para '{input_str}'.")

    def cmd_step(self):
        if self.simulador.execucao is None:
            self.status.config(text="Nenhuma simulação ativa."); return
        resultado = self.simulador.advance()
        self._show_timelines()
        if resultado is ResultadoPasso.CONTINUA:
            self.status.config(text=f"Passo {self.simulador.execucao.passos}...")
        else:
            self.result_indicator = resultado
            self.sim_playing = False
            self.status.config(text=f"Fim da simulação: {resultado.value.upper()}")

    def cmd_play_pause(self):
        if self.simulador.execucao is None: return
        self.sim_playing = not self.sim_playing
        if self.sim_playing:
            self.status.config(text="Reproduzindo...")
            self._playback_step()
        else:
            self.status.config(text="Pausado.")

    def _playback_step(self):
        if self.sim_playing and self.result_indicator is None:
            self.cmd_step(); self.root.after(ANIM_MS, self._playback_step)

    def cmd_reset_sim(self):
        self.simulador.reset_simulation(); self.sim_playing = False; self.result_indicator = None
        self._show_timelines(); self.status.config(text="Simulação reiniciada.")

    def cmd_end_sim(self):
        self.simulador.end_simulation(); self.sim_playing = False; self.result_indicator = None
        self._show_timelines(); self._show_machine(); self.status.config(text="Máquina descarregada.")

    def cmd_run_tests(self):
        casos: List[CasoTeste] = []
        for i, linha in enumerate(ln for ln in self.cases_text.get("1.0", tk.END).split("\n") if ln.strip()):
            try:
                casos.append(parse_test_case(linha))
            except ValueError as e:
                messagebox.showerror("Casos de teste", f"Linha {i+1}: {e}", parent=self.root); return
        try:
            resultados = self.simulador.run_tests(casos)
        except (RuntimeError, ValueError) as e:
            messagebox.showerror("Casos de teste", str(e), parent=self.root); return

        self.results.delete(*self.results.get_children())
        for caso, res in zip(casos, resultados):
            extra = "".join(res.extra.get("tape", res.extra.get("stack", [])))
            self.results.insert("", tk.END, tags=("ok" if res.matched else "falha",),
                                values=(caso.input or "ε", self._fmt(caso.expected), self._fmt(res.result), extra))
        acertos = sum(r.matched for r in resultados)
        self.status.config(text=f"{acertos}/{len(resultados)} casos conferem.")

    @staticmethod
    def _fmt(aceita: bool) -> str:
        return "Aceita" if aceita else "Rejeita"

    def _show_timelines(self):
        self.timelines_list.delete(0, tk.END)
        for linha in self.simulador.timelines:
            self.timelines_list.insert(tk.END, "  ".join(str(campo) for campo in linha))
        if self.result_indicator is not None:
            self.timelines_list.insert(tk.END, f"=> {self.result_indicator.value.upper()}")

    def _show_machine(self):
        linhas = []
        maquina = self.simulador.maquina
        if maquina is None:
            linhas.append(f"(não compilada) {len(self.grafo.nodes)} estados")
            for t in self.grafo.transitions:
                linhas.append(f"  {t.src.label} -> {t.dst.label}: {', '.join(t.conditions)}")
        else:
            linhas.append(f"Tipo: {maquina.tipo.value}")
            linhas.append(f"Alfabeto: {{{', '.join(sorted(maquina.alphabet))}}}")
            for estado in maquina.states:
                marcas = ("→" if estado.initial else " ") + ("*" if estado.final else " ")
                linhas.append(f"{marcas} {estado.label}")
                for t in estado.transitions:
                    linhas.append(f"      -> {t.dst.label}: {', '.join(str(c) for c in t.conditions)}")

        self.machine_text.config(state="normal")
        self.machine_text.delete("1.0", tk.END)
        self.machine_text.insert("1.0", "\n".join(linhas))
        self.machine_text.config(state="disabled")

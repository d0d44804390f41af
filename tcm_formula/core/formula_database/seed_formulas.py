"""
经典方剂种子数据
首次初始化方剂库时写入
"""

CLASSIC_FORMULAS = [
    {
        "id": "mahuang-tang",
        "name": "麻黄汤",
        "pinyin": "mahuang tang",
        "source": "伤寒论",
        "category": "解表剂",
        "composition": ["麻黄", "桂枝", "杏仁", "甘草"],
        "standard_dosage": {"麻黄": 9, "桂枝": 6, "杏仁": 9, "甘草": 3},
        "usage": "水煎服，温覆取微汗。",
        "effect": "发汗解表，宣肺平喘。",
        "indications": "外感风寒表实证。恶寒发热，头身疼痛，无汗而喘，舌苔薄白，脉浮紧。",
        "analysis": "麻黄为君，发汗解表，宣肺平喘；桂枝为臣，解肌发表，温通经脉；杏仁降利肺气，与麻黄相伍一宣一降；炙甘草调和诸药。",
    },
    {
        "id": "guizhi-tang",
        "name": "桂枝汤",
        "pinyin": "guizhi tang",
        "source": "伤寒论",
        "category": "解表剂",
        "composition": ["桂枝", "白芍", "生姜", "大枣", "甘草"],
        "standard_dosage": {"桂枝": 9, "白芍": 9, "生姜": 9, "大枣": 12, "甘草": 6},
        "usage": "水煎服，服后啜热稀粥，温覆取微汗。",
        "effect": "解肌发表，调和营卫。",
        "indications": "外感风寒表虚证。恶风发热，汗出头痛，鼻鸣干呕，苔白不渴，脉浮缓或浮弱。",
        "analysis": "桂枝助卫阳、散风寒为君；芍药益阴敛营为臣；桂芍等量合用，营卫同治；生姜、大枣调和营卫；甘草调和诸药。",
    },
    {
        "id": "baihu-tang",
        "name": "白虎汤",
        "pinyin": "baihu tang",
        "source": "伤寒论",
        "category": "清热剂",
        "composition": ["石膏", "知母", "甘草", "粳米"],
        "standard_dosage": {"石膏": 50, "知母": 18, "甘草": 6, "粳米": 9},
        "usage": "水煎，米熟汤成，温服。",
        "effect": "清热生津。",
        "indications": "气分热盛证。壮热面赤，烦渴引饮，汗出恶热，脉洪大有力。",
        "analysis": "石膏辛甘大寒，清阳明气分大热为君；知母苦寒质润为臣；粳米、甘草益胃生津，防寒凉伤中。",
    },
    {
        "id": "maxingshigan-tang",
        "name": "麻杏石甘汤",
        "pinyin": "ma xing shi gan tang",
        "source": "伤寒论",
        "category": "解表剂",
        "composition": ["麻黄", "杏仁", "石膏", "甘草"],
        "standard_dosage": {"麻黄": 9, "杏仁": 9, "石膏": 18, "甘草": 6},
        "usage": "水煎温服。",
        "effect": "辛凉疏表，清肺平喘。",
        "indications": "外感风邪，邪热壅肺证。身热不解，咳逆气急，甚则鼻煽，口渴，有汗或无汗，舌苔薄白或黄，脉浮而数。",
        "analysis": "麻黄宣肺平喘，石膏清泄肺热，二药相制为用；杏仁降肺气；甘草益气和中，调和寒温。",
    },
    {
        "id": "xiaochaihu-tang",
        "name": "小柴胡汤",
        "pinyin": "xiao chaihu tang",
        "source": "伤寒论",
        "category": "和解剂",
        "composition": ["柴胡", "黄芩", "人参", "半夏", "甘草", "生姜", "大枣"],
        "standard_dosage": {"柴胡": 24, "黄芩": 9, "人参": 9, "半夏": 9, "甘草": 9, "生姜": 9, "大枣": 12},
        "usage": "水煎服。",
        "effect": "和解少阳。",
        "indications": "伤寒少阳证。往来寒热，胸胁苦满，默默不欲饮食，心烦喜呕，口苦，咽干，目眩，舌苔薄白，脉弦。",
        "analysis": "柴胡透泄少阳之邪为君；黄芩清泄少阳之热为臣；半夏、生姜和胃降逆；人参、大枣益气扶正；甘草调和诸药。",
    },
    {
        "id": "sijunzi-tang",
        "name": "四君子汤",
        "pinyin": "si junzi tang",
        "source": "和剂局方",
        "category": "补益剂",
        "composition": ["人参", "白术", "茯苓", "甘草"],
        "standard_dosage": {"人参": 9, "白术": 9, "茯苓": 9, "甘草": 6},
        "usage": "水煎服。",
        "effect": "益气健脾。",
        "indications": "脾胃气虚证。面色萎白，语声低微，气短乏力，食少便溏，舌淡苔白，脉虚弱。",
        "analysis": "人参甘温益气，健脾养胃为君；白术健脾燥湿为臣；茯苓渗湿健脾为佐；炙甘草益气和中为使。",
    },
    {
        "id": "siwu-tang",
        "name": "四物汤",
        "pinyin": "siwu tang",
        "source": "和剂局方",
        "category": "补益剂",
        "composition": ["熟地黄", "当归", "白芍", "川芎"],
        "standard_dosage": {"熟地黄": 12, "当归": 9, "白芍": 9, "川芎": 6},
        "usage": "水煎服。",
        "effect": "补血调血。",
        "indications": "营血虚滞证。头晕目眩，心悸失眠，面色无华，妇人月经不调，量少或经闭不行，舌淡，脉细弦或细涩。",
        "analysis": "熟地黄滋养阴血为君；当归补血活血为臣；白芍养血柔肝，川芎活血行气，共为佐药。",
    },
    {
        "id": "liuweidihuang-wan",
        "name": "六味地黄丸",
        "pinyin": "liuwei dihuang wan",
        "source": "小儿药证直诀",
        "category": "补益剂",
        "composition": ["熟地黄", "山茱萸", "山药", "泽泻", "牡丹皮", "茯苓"],
        "standard_dosage": {"熟地黄": 24, "山茱萸": 12, "山药": 12, "泽泻": 9, "牡丹皮": 9, "茯苓": 9},
        "usage": "蜜丸，每服9g，日二三次；亦可水煎服。",
        "effect": "滋补肝肾。",
        "indications": "肝肾阴虚证。腰膝酸软，头晕目眩，耳鸣耳聋，盗汗，遗精，消渴，骨蒸潮热，舌红少苔，脉沉细数。",
        "analysis": "三补三泻：熟地黄、山茱萸、山药补肾肝脾；泽泻、牡丹皮、茯苓泄浊清热渗湿。",
    },
    {
        "id": "lizhong-wan",
        "name": "理中丸",
        "pinyin": "lizhong wan",
        "source": "伤寒论",
        "category": "温里剂",
        "composition": ["人参", "干姜", "白术", "甘草"],
        "standard_dosage": {"人参": 9, "干姜": 9, "白术": 9, "甘草": 9},
        "usage": "蜜丸，温开水送服；亦可水煎服。",
        "effect": "温中祛寒，补气健脾。",
        "indications": "脾胃虚寒证。脘腹绵绵作痛，喜温喜按，呕吐，大便稀溏，畏寒肢冷，舌淡苔白润，脉沉细或沉迟无力。",
        "analysis": "干姜温中祛寒为君；人参补气健脾为臣；白术健脾燥湿为佐；炙甘草益气和中为使。",
    },
    {
        "id": "wuling-san",
        "name": "五苓散",
        "pinyin": "wuling san",
        "source": "伤寒论",
        "category": "祛湿剂",
        "composition": ["猪苓", "泽泻", "白术", "茯苓", "桂枝"],
        "standard_dosage": {"猪苓": 9, "泽泻": 15, "白术": 9, "茯苓": 9, "桂枝": 6},
        "usage": "散剂，每服6-10g；亦可水煎服。",
        "effect": "利水渗湿，温阳化气。",
        "indications": "膀胱气化不利之蓄水证。小便不利，头痛微热，烦渴欲饮，甚则水入即吐，舌苔白，脉浮。",
        "analysis": "泽泻利水渗湿为君；茯苓、猪苓助君药利水为臣；白术健脾运湿，桂枝温阳化气，共为佐药。",
    },
    {
        "id": "erchen-tang",
        "name": "二陈汤",
        "pinyin": "erchen tang",
        "source": "和剂局方",
        "category": "祛痰剂",
        "composition": ["半夏", "陈皮", "茯苓", "甘草"],
        "standard_dosage": {"半夏": 15, "陈皮": 15, "茯苓": 9, "甘草": 4.5},
        "usage": "加生姜7片，乌梅1个，水煎服。",
        "effect": "燥湿化痰，理气和中。",
        "indications": "湿痰证。咳嗽痰多，色白易咯，恶心呕吐，胸膈痞闷，肢体困重，舌苔白滑或腻，脉滑。",
        "analysis": "半夏燥湿化痰为君；橘红理气行滞为臣；茯苓健脾渗湿为佐；甘草调和诸药。",
    },
    {
        "id": "shaoyaogancao-tang",
        "name": "芍药甘草汤",
        "pinyin": "shaoyao gancao tang",
        "source": "伤寒论",
        "category": "和解剂",
        "composition": ["白芍", "甘草"],
        "standard_dosage": {"白芍": 12, "甘草": 12},
        "usage": "水煎服。",
        "effect": "调和肝脾，缓急止痛。",
        "indications": "伤寒伤阴，筋脉失濡，腿脚挛急，心烦，微恶寒；肝脾不和，脘腹疼痛。",
        "analysis": "芍药酸寒养血敛阴，甘草甘温健脾益气，酸甘化阴，缓急止痛。",
    },
    {
        "id": "yinqiao-san",
        "name": "银翘散",
        "pinyin": "yinqiao san",
        "source": "温病条辨",
        "category": "解表剂",
        "composition": ["连翘", "金银花", "桔梗", "薄荷", "竹叶", "甘草", "荆芥穗", "淡豆豉", "牛蒡子"],
        "standard_dosage": {"连翘": 30, "金银花": 30, "桔梗": 18, "薄荷": 18, "竹叶": 12,
                            "甘草": 15, "荆芥穗": 12, "淡豆豉": 15, "牛蒡子": 18},
        "usage": "共为散，每服18g，鲜苇根汤煎，香气大出即取服。",
        "effect": "辛凉透表，清热解毒。",
        "indications": "温病初起。发热，微恶风寒，无汗或有汗不畅，头痛口渴，咳嗽咽痛，舌尖红，苔薄白或薄黄，脉浮数。",
        "analysis": "金银花、连翘辛凉透邪，清热解毒为君；薄荷、牛蒡子、荆芥穗、淡豆豉解表透邪为臣；桔梗、竹叶、芦根为佐；甘草为使。",
    },
    {
        "id": "buzhongyiqi-tang",
        "name": "补中益气汤",
        "pinyin": "buzhong yiqi tang",
        "source": "内外伤辨惑论",
        "category": "补益剂",
        "composition": ["黄芪", "甘草", "人参", "当归", "陈皮", "升麻", "柴胡", "白术"],
        "standard_dosage": {"黄芪": 18, "甘草": 9, "人参": 6, "当归": 3, "陈皮": 6, "升麻": 6, "柴胡": 6, "白术": 9},
        "usage": "水煎服。",
        "effect": "补中益气，升阳举陷。",
        "indications": "脾虚气陷证及气虚发热证。饮食减少，体倦肢软，少气懒言，面色萎黄，大便稀溏，脱肛，子宫脱垂，久泻久痢。",
        "analysis": "重用黄芪补中益气、升阳固表为君；人参、炙甘草、白术补气健脾为臣；当归养血，陈皮理气；升麻、柴胡升阳举陷。",
    },
    {
        "id": "guizhifuling-wan",
        "name": "桂枝茯苓丸",
        "pinyin": "guizhi fuling wan",
        "source": "金匮要略",
        "category": "理血剂",
        "composition": ["桂枝", "茯苓", "牡丹皮", "桃仁", "白芍"],
        "standard_dosage": {"桂枝": 9, "茯苓": 9, "牡丹皮": 9, "桃仁": 9, "白芍": 9},
        "usage": "蜜丸，每日食前服3g。",
        "effect": "活血化瘀，缓消癥块。",
        "indications": "瘀阻胞宫证。妇人素有癥块，妊娠漏下不止，或胎动不安，血色紫黑晦暗，腹痛拒按。",
        "analysis": "桂枝温通血脉为君；桃仁活血祛瘀为臣；牡丹皮、芍药活血凉血；茯苓渗湿健脾；蜜丸缓消。",
    },
    {
        "id": "zhenganxifeng-tang",
        "name": "镇肝熄风汤",
        "pinyin": "zhengan xifeng tang",
        "source": "衷中参西",
        "category": "治风剂",
        "composition": ["牛膝", "代赭石", "龙骨", "牡蛎", "龟板", "白芍", "玄参", "天冬", "川楝子", "麦芽", "茵陈", "甘草"],
        "standard_dosage": {"牛膝": 30, "代赭石": 30, "龙骨": 15, "牡蛎": 15, "龟板": 15, "白芍": 15,
                            "玄参": 15, "天冬": 15, "川楝子": 6, "麦芽": 6, "茵陈": 6, "甘草": 4.5},
        "usage": "水煎服。",
        "effect": "镇肝熄风，滋阴潜阳。",
        "indications": "类中风。头目眩晕，目胀耳鸣，脑部热痛，面色如醉，心中烦热，或肢体渐觉不利，口角渐形歪斜，脉弦长有力。",
        "analysis": "怀牛膝引血下行为君；代赭石、龙骨、牡蛎镇肝降逆为臣；龟板、玄参、天冬、白芍滋阴柔肝；茵陈、川楝子、麦芽清泄肝热；甘草调和诸药。",
    },
]

# 药物功效与炮制
HERB_INFO = {
    "麻黄": {"effect": "发汗散寒，宣肺平喘，利水消肿。", "paozhi": "生用、蜜炙或捣绒用。"},
    "桂枝": {"effect": "发汗解肌，温通经脉，助阳化气，平冲降气。", "paozhi": "切片生用。"},
    "杏仁": {"effect": "降气止咳平喘，润肠通便。", "paozhi": "生用或炒用，用时捣碎。"},
    "甘草": {"effect": "补脾益气，清热解毒，祛痰止咳，缓急止痛，调和诸药。", "paozhi": "生用或蜜炙用。"},
    "石膏": {"effect": "清热泻火，除烦止渴；煅用收湿敛疮。", "paozhi": "生用打碎先煎，或煅用。"},
    "知母": {"effect": "清热泻火，滋阴润燥。", "paozhi": "生用或盐水炙用。"},
    "粳米": {"effect": "益胃生津，补中和胃。", "paozhi": "生用。"},
    "白芍": {"effect": "养血调经，敛阴止汗，柔肝止痛，平抑肝阳。", "paozhi": "生用、清炒或酒炙用。"},
    "生姜": {"effect": "解表散寒，温中止呕，化痰止咳。", "paozhi": "鲜用，切片。"},
    "大枣": {"effect": "补中益气，养血安神。", "paozhi": "生用，劈破。"},
    "柴胡": {"effect": "疏散退热，疏肝解郁，升举阳气。", "paozhi": "生用或醋炙用。"},
    "黄芩": {"effect": "清热燥湿，泻火解毒，止血，安胎。", "paozhi": "生用、酒炙或炒炭用。"},
    "人参": {"effect": "大补元气，复脉固脱，补脾益肺，生津养血，安神益智。", "paozhi": "润透切薄片，或用时粉碎、捣碎。"},
    "半夏": {"effect": "燥湿化痰，降逆止呕，消痞散结。", "paozhi": "内服多用炮制品：姜半夏、法半夏、清半夏。"},
    "白术": {"effect": "健脾益气，燥湿利水，止汗，安胎。", "paozhi": "生用或土炒、麸炒用。"},
    "茯苓": {"effect": "利水渗湿，健脾，宁心安神。", "paozhi": "生用。"},
    "熟地黄": {"effect": "补血滋阴，益精填髓。", "paozhi": "生地黄加黄酒拌蒸至内外色黑油润。"},
    "当归": {"effect": "补血活血，调经止痛，润肠通便。", "paozhi": "生用或酒炙用。"},
    "川芎": {"effect": "活血行气，祛风止痛。", "paozhi": "切片生用或酒炙用。"},
    "黄芪": {"effect": "补气升阳，固表止汗，利水消肿，生津养血，托毒排脓，敛疮生肌。", "paozhi": "生用或蜜炙用。"},
}
